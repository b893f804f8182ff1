"""
Rules a candidate reservation interval must satisfy before it is checked
against other bookings: working day, opening hours, break and the advance
booking window.
"""
from datetime import datetime, timedelta
from typing import Iterable, Optional

from reservations.core.exceptions import (
    BreakConflict,
    ClosedDay,
    InPast,
    OutsideHours,
    TooFarAhead,
    TooSoon,
)
from reservations.models.schedule import DayOfWeek, ScheduleSettings, WorkingDay


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """True if [a_start, a_end) overlaps [b_start, b_end). Touching ends do not."""
    return a_start < b_end and a_end > b_start


def find_working_day(working_days: Iterable[WorkingDay], day: DayOfWeek) -> Optional[WorkingDay]:
    for wd in working_days:
        if wd.day_of_week == day:
            return wd
    return None


def validate_working_hours(start: datetime, end: datetime, working_days: Iterable[WorkingDay]) -> None:
    day_of_week = DayOfWeek.of(start.date())

    config = find_working_day(working_days, day_of_week)
    if config is None:
        raise ClosedDay(f"The business is not open on {day_of_week.value}")

    if config.is_day_off or config.start_time is None or config.end_time is None:
        raise ClosedDay(f"The business is closed on {day_of_week.value}")

    # same-day bookings only: an end on a later date cannot be compared by time of day
    if end.date() != start.date():
        raise OutsideHours("Reservations cannot span midnight")

    request_start = start.time()
    request_end = end.time()

    if request_start < config.start_time or request_end > config.end_time:
        raise OutsideHours("Selected time is outside of business working hours")

    if config.has_break and overlaps(
        request_start, request_end, config.break_start_time, config.break_end_time
    ):
        raise BreakConflict("Selected time overlaps with a business break")


def validate_advance_booking(start: datetime, settings: ScheduleSettings, now: datetime) -> None:
    if settings.min_advance_booking_hours is not None:
        earliest_allowed = now + timedelta(hours=settings.min_advance_booking_hours)
        if start < earliest_allowed:
            raise TooSoon(
                "This booking is too short-notice. Minimum lead time is "
                f"{settings.min_advance_booking_hours} hours."
            )

    if settings.max_advance_booking_days is not None:
        latest_allowed = now + timedelta(days=settings.max_advance_booking_days)
        if start > latest_allowed:
            raise TooFarAhead(
                "This date is too far in the future. You can only book up to "
                f"{settings.max_advance_booking_days} days in advance."
            )

    if start < now:
        raise InPast("Cannot create a reservation for a past date.")


def validate_candidate(
    start: datetime,
    end: datetime,
    settings: ScheduleSettings,
    working_days: Iterable[WorkingDay],
    now: datetime,
) -> None:
    """Raise the first PolicyViolation the interval [start, end) triggers.

    Checks run in a fixed order: closed day, opening hours, break, minimum
    lead time, maximum lead time, past date.
    """
    validate_working_hours(start, end, working_days)
    validate_advance_booking(start, settings, now)
