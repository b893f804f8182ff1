import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from reservations.core.config import settings
from reservations.core.exceptions import BookingError
from reservations.core.logging import configure_logging
from reservations.database import create_db_and_tables
from reservations.routers import availability, notifications, reservations, schedule

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="reservations")
app.include_router(reservations.router)
app.include_router(availability.router)
app.include_router(schedule.router)
app.include_router(notifications.router)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


@app.on_event("startup")
def on_startup():
    create_db_and_tables()


@app.get("/")
def root():
    return {"message": "reservations API running"}
