"""
Busy/closed intervals of a business over a viewing window.

The result is the union of closed hours, breaks, live reservations and time
off. Blocks are sorted by start but never merged, so they may overlap.
"""
from datetime import datetime, time, timedelta
from typing import List

from sqlmodel import Session

from reservations.models.availability import BusyBlock, BusyBlockKind
from reservations.models.schedule import DayOfWeek, WorkingDay
from reservations.services.booking import find_active_reservations
from reservations.services.directory import get_business
from reservations.services.schedule import load_schedule
from reservations.services.schedule_policy import find_working_day
from reservations.services.time_off import find_time_off_in_range


def calculate_closed_blocks(
    working_days: List[WorkingDay], view_start: datetime, view_end: datetime
) -> List[BusyBlock]:
    blocks: List[BusyBlock] = []

    day = view_start.date()
    while day <= view_end.date():
        midnight = datetime.combine(day, time.min)
        next_midnight = midnight + timedelta(days=1)
        config = find_working_day(working_days, DayOfWeek.of(day))

        if config is None or config.is_day_off or config.start_time is None or config.end_time is None:
            blocks.append(BusyBlock(start=midnight, end=next_midnight, kind=BusyBlockKind.CLOSED))
        else:
            blocks.append(
                BusyBlock(start=midnight, end=datetime.combine(day, config.start_time), kind=BusyBlockKind.CLOSED)
            )
            if config.has_break:
                blocks.append(
                    BusyBlock(
                        start=datetime.combine(day, config.break_start_time),
                        end=datetime.combine(day, config.break_end_time),
                        kind=BusyBlockKind.BREAK,
                    )
                )
            blocks.append(
                BusyBlock(start=datetime.combine(day, config.end_time), end=next_midnight, kind=BusyBlockKind.CLOSED)
            )

        day += timedelta(days=1)

    return blocks


def get_busy_blocks(
    session: Session, business_id: int, view_start: datetime, view_end: datetime
) -> List[BusyBlock]:
    get_business(session, business_id)
    _, working_days = load_schedule(session, business_id)

    blocks = calculate_closed_blocks(working_days, view_start, view_end)

    for reservation in find_active_reservations(session, business_id, view_start, view_end):
        blocks.append(
            BusyBlock(start=reservation.start_time, end=reservation.end_time, kind=BusyBlockKind.OCCUPIED)
        )

    for time_off in find_time_off_in_range(session, business_id, view_start, view_end):
        blocks.append(
            BusyBlock(start=time_off.start_time, end=time_off.end_time, kind=BusyBlockKind.OCCUPIED)
        )

    # sorted() is stable: equal starts keep insertion order
    return sorted(blocks, key=lambda b: b.start)
