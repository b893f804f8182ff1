"""
Shared fixtures: in-memory database, a business with a configurable week,
and an API client authenticated through real bearer tokens.
"""
from datetime import date, datetime, time, timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from reservations.core.config import settings
from reservations.database import get_session
from reservations.main import app
from reservations.models import business as _business  # noqa: F401
from reservations.models import notification as _notification  # noqa: F401
from reservations.models import reservation as _reservation  # noqa: F401
from reservations.models import schedule as _schedule  # noqa: F401
from reservations.models import time_off as _time_off  # noqa: F401
from reservations.models.business import Business, Offering
from reservations.models.schedule import DayOfWeek, ScheduleSettingsUpdate, WorkingDayUpdate
from reservations.models.user import User
from reservations.routers.reservations import get_notification_sink
from reservations.services.booking import BookingEngine, BusinessLocks
from reservations.services.notifications import DatabaseNotificationSink, RecordingNotifier
from reservations.services.schedule import create_default_schedule, update_schedule

# Monday
MONDAY = date(2030, 1, 7)
NOW = datetime(2030, 1, 7, 8, 0)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def owner(session):
    user = User(name="Olivia Owner", email="owner@example.com")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def customer(session):
    user = User(name="Carl Customer", email="customer@example.com")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def stranger(session):
    user = User(name="Sam Stranger", email="stranger@example.com")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def business(session, owner):
    business = Business(name="Corner Barber", owner_id=owner.id)
    session.add(business)
    session.commit()
    session.refresh(business)
    create_default_schedule(session, business.id)
    return business


@pytest.fixture
def offering(session, business):
    offering = Offering(business_id=business.id, name="Haircut", price=40.0, duration_minutes=30)
    session.add(offering)
    session.commit()
    session.refresh(offering)
    return offering


@pytest.fixture
def configure_week(session, business, owner):
    """Open every weekday with the same hours; the rest of the week is off."""

    def configure(
        open_at=time(9, 0),
        close_at=time(17, 0),
        break_start=None,
        break_end=None,
        open_days=(DayOfWeek.MONDAY, DayOfWeek.TUESDAY, DayOfWeek.WEDNESDAY,
                   DayOfWeek.THURSDAY, DayOfWeek.FRIDAY),
        min_hours=None,
        max_days=None,
        auto_confirm=True,
    ):
        days = []
        for day in DayOfWeek:
            if day in open_days:
                days.append(
                    WorkingDayUpdate(
                        day_of_week=day,
                        start_time=open_at,
                        end_time=close_at,
                        break_start_time=break_start,
                        break_end_time=break_end,
                    )
                )
            else:
                days.append(WorkingDayUpdate(day_of_week=day, is_day_off=True))

        return update_schedule(
            session,
            business.id,
            owner.id,
            ScheduleSettingsUpdate(
                min_advance_booking_hours=min_hours,
                max_advance_booking_days=max_days,
                auto_confirm_appointments=auto_confirm,
                working_days=days,
            ),
        )

    return configure


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def booking(notifier):
    return BookingEngine(notifier=notifier, clock=lambda: NOW, locks=BusinessLocks())


@pytest.fixture
def client(engine):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_notification_sink] = lambda: DatabaseNotificationSink(engine)
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(email: str, expires_in: timedelta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)) -> str:
    # mirrors what the accounts service issues
    claims = {"sub": email, "exp": datetime.utcnow() + expires_in}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {make_token(user.email)}"}
