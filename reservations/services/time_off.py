import logging
from datetime import datetime
from typing import List

from sqlmodel import Session, select

from reservations.core.exceptions import InvalidTimeOff, TimeOffNotFound
from reservations.models.schedule import ScheduleSettings
from reservations.models.time_off import TimeOff, TimeOffCreate
from reservations.services.directory import get_business, require_owner
from reservations.services.schedule import get_settings

logger = logging.getLogger(__name__)


def add_time_off(session: Session, business_id: int, actor_id: int, payload: TimeOffCreate) -> TimeOff:
    business = get_business(session, business_id)
    require_owner(business, actor_id, "add time off")

    if payload.end_time <= payload.start_time:
        raise InvalidTimeOff("end_time must be after start_time")

    schedule = get_settings(session, business_id)

    time_off = TimeOff(
        schedule_id=schedule.id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        reason=payload.reason,
    )
    session.add(time_off)
    session.commit()
    session.refresh(time_off)

    logger.info(
        "Time off %s added for business %s (%s -> %s)",
        time_off.id, business_id, time_off.start_time, time_off.end_time,
    )
    return time_off


def list_time_off(session: Session, business_id: int) -> List[TimeOff]:
    get_business(session, business_id)
    schedule = get_settings(session, business_id)
    return session.exec(
        select(TimeOff)
        .where(TimeOff.schedule_id == schedule.id)
        .order_by(TimeOff.start_time)
    ).all()


def delete_time_off(session: Session, time_off_id: int, actor_id: int) -> None:
    time_off = session.get(TimeOff, time_off_id)
    if not time_off:
        raise TimeOffNotFound(f"Time off {time_off_id} not found")

    schedule = session.get(ScheduleSettings, time_off.schedule_id)
    business = get_business(session, schedule.business_id)
    require_owner(business, actor_id, "delete time off")

    session.delete(time_off)
    session.commit()
    logger.info("Time off %s removed from business %s", time_off_id, business.id)


def find_time_off_in_range(
    session: Session, business_id: int, start: datetime, end: datetime
) -> List[TimeOff]:
    """Time-off rows of the business strictly overlapping [start, end)."""
    return session.exec(
        select(TimeOff)
        .join(ScheduleSettings, TimeOff.schedule_id == ScheduleSettings.id)
        .where(
            ScheduleSettings.business_id == business_id,
            TimeOff.start_time < end,
            TimeOff.end_time > start,
        )
        .order_by(TimeOff.start_time)
    ).all()
