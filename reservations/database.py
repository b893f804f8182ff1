import logging

from sqlmodel import Session, SQLModel, create_engine

from reservations.core.config import settings

logger = logging.getLogger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # FastAPI runs sync endpoints in a threadpool
    connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    pool_pre_ping=True,
    connect_args=connect_args,
)


def create_db_and_tables():
    # table classes must be imported before create_all
    from reservations.models import (  # noqa: F401
        business,
        notification,
        reservation,
        schedule,
        time_off,
        user,
    )

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")


def get_session():
    with Session(engine) as session:
        yield session
