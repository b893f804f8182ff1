from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from reservations.core.security import get_current_user
from reservations.database import get_session
from reservations.models.schedule import ScheduleSettingsRead, ScheduleSettingsUpdate
from reservations.models.time_off import TimeOff, TimeOffCreate
from reservations.models.user import User
from reservations.services import schedule as schedule_service
from reservations.services import time_off as time_off_service

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("/{business_id}", response_model=ScheduleSettingsRead)
def get_schedule(business_id: int, session: Session = Depends(get_session)):
    return schedule_service.get_schedule(session, business_id)


@router.put("/{business_id}", response_model=ScheduleSettingsRead)
def update_schedule(
    business_id: int,
    payload: ScheduleSettingsUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return schedule_service.update_schedule(session, business_id, current_user.id, payload)


# =========================
# TIME OFF
# =========================
@router.get("/{business_id}/time-off", response_model=List[TimeOff])
def list_time_off(business_id: int, session: Session = Depends(get_session)):
    return time_off_service.list_time_off(session, business_id)


@router.post("/{business_id}/time-off", status_code=status.HTTP_201_CREATED, response_model=TimeOff)
def add_time_off(
    business_id: int,
    payload: TimeOffCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return time_off_service.add_time_off(session, business_id, current_user.id, payload)


@router.delete("/time-off/{time_off_id}")
def delete_time_off(
    time_off_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    time_off_service.delete_time_off(session, time_off_id, current_user.id)
    return {"message": "Time off removed"}
