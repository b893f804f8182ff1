"""
Domain errors raised by the booking services.

Each category carries the HTTP status the API answers with; the services never
raise HTTPException themselves.
"""


class BookingError(Exception):
    """Base class for all reservation-domain errors."""

    status_code = 500

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.__class__.__name__)
        self.detail = detail or self.__class__.__name__

    @property
    def code(self) -> str:
        return self.__class__.__name__


# =========================
# 404
# =========================

class NotFoundError(BookingError):
    status_code = 404


class UserNotFound(NotFoundError):
    pass


class BusinessNotFound(NotFoundError):
    pass


class OfferingNotFound(NotFoundError):
    pass


class ScheduleNotFound(NotFoundError):
    pass


class ReservationNotFound(NotFoundError):
    pass


class TimeOffNotFound(NotFoundError):
    pass


class NotificationNotFound(NotFoundError):
    pass


# =========================
# 400
# =========================

class PolicyViolation(BookingError):
    """A candidate interval breaks one of the business scheduling rules."""

    status_code = 400


class ClosedDay(PolicyViolation):
    pass


class OutsideHours(PolicyViolation):
    pass


class BreakConflict(PolicyViolation):
    pass


class TooSoon(PolicyViolation):
    pass


class TooFarAhead(PolicyViolation):
    pass


class InPast(PolicyViolation):
    pass


class InvalidSchedule(PolicyViolation):
    pass


class InvalidTimeOff(PolicyViolation):
    pass


class InvalidStartTime(PolicyViolation):
    pass


class InvalidOffering(PolicyViolation):
    pass


# =========================
# 409
# =========================

class ConflictError(BookingError):
    status_code = 409


class SlotTaken(ConflictError):
    pass


class BusinessUnavailable(ConflictError):
    pass


class AlreadyCancelled(ConflictError):
    pass


class InvalidStatusTransition(ConflictError):
    pass


# =========================
# 403
# =========================

class ForbiddenError(BookingError):
    status_code = 403
