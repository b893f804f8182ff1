from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlmodel import Session

from reservations.core.security import get_current_user
from reservations.database import engine, get_session
from reservations.models.reservation import ReasonRequest, Reservation, ReservationCreate
from reservations.models.user import User
from reservations.services.booking import BookingEngine
from reservations.services.notifications import BackgroundNotifier, DatabaseNotificationSink


router = APIRouter(prefix="/reservations", tags=["reservations"])


def get_notification_sink() -> DatabaseNotificationSink:
    return DatabaseNotificationSink(engine)


def get_booking_engine(
    background_tasks: BackgroundTasks,
    sink: DatabaseNotificationSink = Depends(get_notification_sink),
) -> BookingEngine:
    return BookingEngine(notifier=BackgroundNotifier(background_tasks, sink))


# =========================
# CREATE (customer)
# =========================
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Reservation)
def create_reservation(
    payload: ReservationCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    booking: BookingEngine = Depends(get_booking_engine),
):
    return booking.create_reservation(
        session,
        business_id=payload.business_id,
        offering_id=payload.offering_id,
        user_id=current_user.id,
        requested_start=payload.start_time,
        notes=payload.notes,
    )


# =========================
# LIST
# =========================
@router.get("/mine", response_model=List[Reservation])
def list_my_reservations(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    booking: BookingEngine = Depends(get_booking_engine),
):
    return booking.list_user_reservations(session, current_user.id)


@router.get("/business/{business_id}", response_model=List[Reservation])
def list_business_reservations(
    business_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    booking: BookingEngine = Depends(get_booking_engine),
):
    return booking.list_business_reservations(session, business_id, current_user.id)


# =========================
# STATUS CHANGES
# =========================
@router.patch("/{reservation_id}/confirm", response_model=Reservation)
def confirm_reservation(
    reservation_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    booking: BookingEngine = Depends(get_booking_engine),
):
    return booking.confirm_reservation(session, reservation_id, current_user.id)


@router.patch("/{reservation_id}/reject", response_model=Reservation)
def reject_reservation(
    reservation_id: int,
    payload: Optional[ReasonRequest] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    booking: BookingEngine = Depends(get_booking_engine),
):
    reason = payload.reason if payload else None
    return booking.reject_reservation(session, reservation_id, current_user.id, reason)


@router.patch("/{reservation_id}/cancel", response_model=Reservation)
def cancel_reservation(
    reservation_id: int,
    payload: Optional[ReasonRequest] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    booking: BookingEngine = Depends(get_booking_engine),
):
    reason = payload.reason if payload else None
    return booking.cancel_reservation(session, reservation_id, current_user.id, reason)
