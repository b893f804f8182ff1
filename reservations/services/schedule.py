import logging
from datetime import time
from typing import List, Tuple

from sqlmodel import Session, select

from reservations.core.config import settings as app_settings
from reservations.core.exceptions import InvalidSchedule, ScheduleNotFound
from reservations.models.schedule import (
    DayOfWeek,
    ScheduleSettings,
    ScheduleSettingsRead,
    ScheduleSettingsUpdate,
    WorkingDay,
    WorkingDayBase,
    WorkingDayRead,
)
from reservations.services.directory import get_business, require_owner

logger = logging.getLogger(__name__)

DEFAULT_OPEN = time(9, 0)
DEFAULT_CLOSE = time(17, 0)
WEEKEND = (DayOfWeek.SATURDAY, DayOfWeek.SUNDAY)


def get_settings(session: Session, business_id: int, for_update: bool = False) -> ScheduleSettings:
    statement = select(ScheduleSettings).where(ScheduleSettings.business_id == business_id)
    if for_update:
        statement = statement.with_for_update()

    schedule = session.exec(statement).first()
    if not schedule:
        raise ScheduleNotFound(f"Schedule for business {business_id} not found")
    return schedule


def get_working_days(session: Session, schedule_id: int) -> List[WorkingDay]:
    rows = session.exec(
        select(WorkingDay).where(WorkingDay.schedule_id == schedule_id)
    ).all()
    order = list(DayOfWeek)
    return sorted(rows, key=lambda wd: order.index(wd.day_of_week))


def load_schedule(session: Session, business_id: int) -> Tuple[ScheduleSettings, List[WorkingDay]]:
    schedule = get_settings(session, business_id)
    return schedule, get_working_days(session, schedule.id)


# =========================
# DEFAULT SCHEDULE (new business)
# =========================
def create_default_schedule(session: Session, business_id: int) -> ScheduleSettings:
    """Mon-Fri 09:00-17:00, weekend off, booking limits from configuration."""
    schedule = ScheduleSettings(
        business_id=business_id,
        min_advance_booking_hours=app_settings.DEFAULT_MIN_ADVANCE_BOOKING_HOURS,
        max_advance_booking_days=app_settings.DEFAULT_MAX_ADVANCE_BOOKING_DAYS,
        default_slot_duration_minutes=app_settings.DEFAULT_SLOT_DURATION_MINUTES,
        auto_confirm_appointments=app_settings.DEFAULT_AUTO_CONFIRM,
    )
    session.add(schedule)
    session.flush()

    for day in DayOfWeek:
        session.add(
            WorkingDay(
                schedule_id=schedule.id,
                day_of_week=day,
                is_day_off=day in WEEKEND,
                start_time=DEFAULT_OPEN,
                end_time=DEFAULT_CLOSE,
            )
        )

    session.commit()
    session.refresh(schedule)
    logger.info("Created default schedule %s for business %s", schedule.id, business_id)
    return schedule


# =========================
# READ
# =========================
def get_schedule(session: Session, business_id: int) -> ScheduleSettingsRead:
    get_business(session, business_id)
    schedule, working_days = load_schedule(session, business_id)
    return ScheduleSettingsRead(
        id=schedule.id,
        business_id=schedule.business_id,
        min_advance_booking_hours=schedule.min_advance_booking_hours,
        max_advance_booking_days=schedule.max_advance_booking_days,
        default_slot_duration_minutes=schedule.default_slot_duration_minutes,
        auto_confirm_appointments=schedule.auto_confirm_appointments,
        working_days=[WorkingDayRead.model_validate(wd, from_attributes=True) for wd in working_days],
    )


# =========================
# UPDATE (replaces all seven days)
# =========================
def validate_working_day(day: WorkingDayBase) -> None:
    name = day.day_of_week.value

    if (day.break_start_time is None) != (day.break_end_time is None):
        raise InvalidSchedule(f"Break needs both a start and an end for {name}")

    if day.is_day_off:
        return

    if day.start_time is None or day.end_time is None:
        raise InvalidSchedule(f"Opening and closing time are required for {name}")

    if day.start_time >= day.end_time:
        raise InvalidSchedule(f"Opening time must be before closing time for {name}")

    if day.has_break:
        if day.break_start_time >= day.break_end_time:
            raise InvalidSchedule(f"Break start must be before break end for {name}")

        if day.break_start_time < day.start_time or day.break_end_time > day.end_time:
            raise InvalidSchedule(f"Break must be within working hours for {name}")


def update_schedule(
    session: Session,
    business_id: int,
    actor_id: int,
    payload: ScheduleSettingsUpdate,
) -> ScheduleSettingsRead:
    business = get_business(session, business_id)
    require_owner(business, actor_id, "update the schedule")

    days = [d.day_of_week for d in payload.working_days]
    if len(days) != len(DayOfWeek) or set(days) != set(DayOfWeek):
        raise InvalidSchedule("Exactly one working day per weekday is required")

    # validate everything before touching any row
    for day in payload.working_days:
        validate_working_day(day)

    schedule = get_settings(session, business_id)
    schedule.min_advance_booking_hours = payload.min_advance_booking_hours
    schedule.max_advance_booking_days = payload.max_advance_booking_days
    schedule.default_slot_duration_minutes = payload.default_slot_duration_minutes
    schedule.auto_confirm_appointments = payload.auto_confirm_appointments
    session.add(schedule)

    existing = {wd.day_of_week: wd for wd in get_working_days(session, schedule.id)}
    for day in payload.working_days:
        row = existing.get(day.day_of_week) or WorkingDay(
            schedule_id=schedule.id, day_of_week=day.day_of_week
        )
        row.is_day_off = day.is_day_off
        row.start_time = day.start_time
        row.end_time = day.end_time
        row.break_start_time = day.break_start_time
        row.break_end_time = day.break_end_time
        session.add(row)

    session.commit()
    logger.info("Schedule for business %s updated by user %s", business_id, actor_id)
    return get_schedule(session, business_id)
