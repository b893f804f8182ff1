from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from reservations.core.security import get_current_user
from reservations.database import get_session
from reservations.models.notification import Notification
from reservations.models.user import User
from reservations.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=List[Notification])
def list_latest(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return notification_service.list_notifications(session, current_user.id)


@router.get("/unread-count")
def unread_count(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return {"unread": notification_service.count_unread(session, current_user.id)}


@router.patch("/read-all")
def mark_all_read(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    updated = notification_service.mark_all_as_read(session, current_user.id)
    return {"updated": updated}


@router.patch("/{notification_id}/read", response_model=Notification)
def mark_read(
    notification_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return notification_service.mark_as_read(session, notification_id, current_user.id)
