"""
Booking admission engine.

A reservation request goes through the schedule policy, then the overlap
checks against live reservations and time off, and is only then persisted.
The overlap checks and the insert run under a per-business lock (plus a row
lock on the business schedule where the database supports it), so two
concurrent requests for intersecting intervals cannot both be admitted.
"""
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from sqlmodel import Session, select

from reservations.core.exceptions import (
    AlreadyCancelled,
    BusinessUnavailable,
    ForbiddenError,
    InvalidOffering,
    InvalidStartTime,
    InvalidStatusTransition,
    OfferingNotFound,
    ReservationNotFound,
    SlotTaken,
)
from reservations.models.business import Business, Offering
from reservations.models.notification import NotificationKind
from reservations.models.reservation import Reservation, ReservationStatus
from reservations.models.user import User
from reservations.services.directory import (
    get_business,
    get_offering,
    get_user,
    require_owner,
)
from reservations.services.notifications import (
    NotificationMessage,
    Notifier,
    format_when,
)
from reservations.services.schedule import get_settings, load_schedule
from reservations.services.schedule_policy import validate_candidate
from reservations.services.time_off import find_time_off_in_range

logger = logging.getLogger(__name__)

OWNER_URL = "/dashboard"
CUSTOMER_URL = "/reservations"


class BusinessLocks:
    """One mutex per business id, created on first use.

    Entries are never evicted; the map grows with the number of distinct
    businesses that have taken a booking in this process.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[int, threading.Lock] = {}

    def for_business(self, business_id: int) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(business_id, threading.Lock())


business_locks = BusinessLocks()


def find_active_reservations(
    session: Session, business_id: int, start: datetime, end: datetime
) -> List[Reservation]:
    """Non-cancelled reservations of the business strictly overlapping [start, end)."""
    return session.exec(
        select(Reservation)
        .where(
            Reservation.business_id == business_id,
            Reservation.status != ReservationStatus.CANCELLED,
            Reservation.start_time < end,
            Reservation.end_time > start,
        )
        .order_by(Reservation.start_time)
    ).all()


class BookingEngine:
    def __init__(
        self,
        notifier: Notifier,
        clock: Callable[[], datetime] = datetime.now,
        locks: BusinessLocks = business_locks,
    ):
        self.notifier = notifier
        self.clock = clock
        self.locks = locks

    # =========================
    # CREATE
    # =========================
    def create_reservation(
        self,
        session: Session,
        business_id: int,
        offering_id: int,
        user_id: int,
        requested_start: datetime,
        notes: Optional[str] = None,
    ) -> Reservation:
        business = get_business(session, business_id)

        offering = get_offering(session, offering_id)
        if offering.business_id != business_id:
            raise OfferingNotFound(f"Offering {offering_id} is not offered by business {business_id}")

        if offering.duration_minutes <= 0:
            raise InvalidOffering(f"Offering {offering_id} has no positive duration")

        if requested_start.tzinfo is not None:
            raise InvalidStartTime("Start time must be a business-local time without a UTC offset")

        customer = get_user(session, user_id)

        end = requested_start + timedelta(minutes=offering.duration_minutes)

        schedule, working_days = load_schedule(session, business_id)
        validate_candidate(requested_start, end, schedule, working_days, self.clock())

        with self.locks.for_business(business_id):
            try:
                # row lock on the schedule serializes admissions across processes
                get_settings(session, business_id, for_update=True)

                if find_active_reservations(session, business_id, requested_start, end):
                    raise SlotTaken("This time slot is already reserved by another customer.")

                if find_time_off_in_range(session, business_id, requested_start, end):
                    raise BusinessUnavailable("The business is unavailable during this time (time off).")

                status = (
                    ReservationStatus.CONFIRMED
                    if schedule.auto_confirm_appointments
                    else ReservationStatus.PENDING
                )
                reservation = Reservation(
                    business_id=business_id,
                    offering_id=offering_id,
                    user_id=user_id,
                    start_time=requested_start,
                    end_time=end,
                    status=status,
                    notes=notes,
                    created_at=self.clock(),
                )
                session.add(reservation)
                session.commit()
            except Exception:
                session.rollback()
                raise

        session.refresh(reservation)
        logger.info(
            "Reservation %s admitted for business %s (%s -> %s, %s)",
            reservation.id, business_id, requested_start, end, reservation.status.value,
        )

        self._dispatch(self._created_messages(reservation, business, offering, customer))
        return reservation

    # =========================
    # STATE TRANSITIONS
    # =========================
    def confirm_reservation(self, session: Session, reservation_id: int, actor_id: int) -> Reservation:
        reservation = self._get(session, reservation_id)
        business = get_business(session, reservation.business_id)
        require_owner(business, actor_id, "confirm reservations")

        if reservation.status != ReservationStatus.PENDING:
            raise InvalidStatusTransition("Only pending reservations can be confirmed")

        reservation.status = ReservationStatus.CONFIRMED
        self._save(session, reservation)
        logger.info("Reservation %s confirmed", reservation.id)

        offering = session.get(Offering, reservation.offering_id)
        self._dispatch([
            NotificationMessage(
                user_id=reservation.user_id,
                title="Reservation Confirmed",
                message=(
                    f"Your reservation at {business.name} for '{offering.name}' "
                    f"on {format_when(reservation.start_time)} has been confirmed!"
                ),
                kind=NotificationKind.SUCCESS,
                target_url=CUSTOMER_URL,
            )
        ])
        return reservation

    def reject_reservation(
        self, session: Session, reservation_id: int, actor_id: int, reason: Optional[str] = None
    ) -> Reservation:
        reservation = self._get(session, reservation_id)
        business = get_business(session, reservation.business_id)
        require_owner(business, actor_id, "reject reservations")

        if reservation.status != ReservationStatus.PENDING:
            raise InvalidStatusTransition("Only pending reservations can be rejected")

        self._mark_cancelled(reservation, "business", reason)
        self._save(session, reservation)
        logger.info("Reservation %s rejected", reservation.id)

        offering = session.get(Offering, reservation.offering_id)
        reason_text = f" Reason: {reason}" if reason and reason.strip() else ""
        self._dispatch([
            NotificationMessage(
                user_id=reservation.user_id,
                title="Reservation Rejected",
                message=(
                    f"Your reservation at {business.name} for '{offering.name}' "
                    f"on {format_when(reservation.start_time)} was not approved.{reason_text}"
                ),
                kind=NotificationKind.ALERT,
                target_url=CUSTOMER_URL,
            )
        ])
        return reservation

    def cancel_reservation(
        self, session: Session, reservation_id: int, actor_id: int, reason: Optional[str] = None
    ) -> Reservation:
        reservation = self._get(session, reservation_id)
        business = get_business(session, reservation.business_id)

        is_customer = reservation.user_id == actor_id
        is_owner = business.owner_id == actor_id
        if not (is_customer or is_owner):
            raise ForbiddenError("Only the customer or the business owner can cancel this reservation")

        if reservation.status == ReservationStatus.CANCELLED:
            raise AlreadyCancelled("Reservation is already cancelled.")

        self._mark_cancelled(reservation, "customer" if is_customer else "business", reason)
        self._save(session, reservation)
        logger.info("Reservation %s cancelled by %s", reservation.id, reservation.cancelled_by)

        offering = session.get(Offering, reservation.offering_id)
        when = format_when(reservation.start_time)

        if is_customer:
            customer = session.get(User, reservation.user_id)
            message = NotificationMessage(
                user_id=business.owner_id,
                title="Reservation Cancelled",
                message=f"{customer.name} cancelled their reservation for '{offering.name}' on {when}.",
                kind=NotificationKind.WARNING,
                target_url=OWNER_URL,
            )
        else:
            message = NotificationMessage(
                user_id=reservation.user_id,
                title="Reservation Cancelled",
                message=(
                    f"Your reservation at {business.name} for '{offering.name}' "
                    f"on {when} has been cancelled by the business."
                ),
                kind=NotificationKind.ALERT,
                target_url=CUSTOMER_URL,
            )
        self._dispatch([message])
        return reservation

    # =========================
    # LISTING
    # =========================
    def list_user_reservations(self, session: Session, user_id: int) -> List[Reservation]:
        return session.exec(
            select(Reservation)
            .where(Reservation.user_id == user_id)
            .order_by(Reservation.start_time)
        ).all()

    def list_business_reservations(self, session: Session, business_id: int, actor_id: int) -> List[Reservation]:
        business = get_business(session, business_id)
        require_owner(business, actor_id, "list the business reservations")
        return session.exec(
            select(Reservation)
            .where(Reservation.business_id == business_id)
            .order_by(Reservation.start_time)
        ).all()

    # =========================
    # HELPERS
    # =========================
    def _get(self, session: Session, reservation_id: int) -> Reservation:
        reservation = session.get(Reservation, reservation_id)
        if not reservation:
            raise ReservationNotFound(f"Reservation {reservation_id} not found")
        return reservation

    def _save(self, session: Session, reservation: Reservation) -> None:
        session.add(reservation)
        session.commit()
        session.refresh(reservation)

    def _mark_cancelled(self, reservation: Reservation, by: str, reason: Optional[str]) -> None:
        reservation.status = ReservationStatus.CANCELLED
        reservation.cancelled_at = self.clock()
        reservation.cancelled_by = by
        reservation.cancel_reason = reason

    def _dispatch(self, messages: List[NotificationMessage]) -> None:
        # the reservation is already committed; a failing notifier must not undo it
        for message in messages:
            try:
                self.notifier.notify(message)
            except Exception:
                logger.exception("Could not queue notification %r for user %s", message.title, message.user_id)

    def _created_messages(
        self, reservation: Reservation, business: Business, offering: Offering, customer: User
    ) -> List[NotificationMessage]:
        when = format_when(reservation.start_time)
        confirmed = reservation.status == ReservationStatus.CONFIRMED

        owner_message = NotificationMessage(
            user_id=business.owner_id,
            title="New Reservation Confirmed" if confirmed else "New Reservation Request",
            message=(
                f"{customer.name} booked '{offering.name}' for {when}."
                + ("" if confirmed else " Please review and confirm.")
            ),
            kind=NotificationKind.SUCCESS if confirmed else NotificationKind.INFO,
            target_url=OWNER_URL,
        )

        if confirmed:
            customer_message = NotificationMessage(
                user_id=customer.id,
                title="Reservation Confirmed",
                message=f"Your reservation at {business.name} for '{offering.name}' on {when} has been confirmed.",
                kind=NotificationKind.SUCCESS,
                target_url=CUSTOMER_URL,
            )
        else:
            customer_message = NotificationMessage(
                user_id=customer.id,
                title="Reservation Received",
                message=(
                    f"Your reservation request at {business.name} for '{offering.name}' on {when} "
                    "has been received. The business will review and confirm shortly."
                ),
                kind=NotificationKind.INFO,
                target_url=CUSTOMER_URL,
            )

        return [owner_message, customer_message]
