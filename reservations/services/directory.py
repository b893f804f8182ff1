"""Lookups against the user and business directories.

Every other service resolves owners and customers through these helpers
instead of following object references.
"""
from sqlmodel import Session

from reservations.core.exceptions import (
    BusinessNotFound,
    ForbiddenError,
    OfferingNotFound,
    UserNotFound,
)
from reservations.models.business import Business, Offering
from reservations.models.user import User


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise UserNotFound(f"User {user_id} not found")
    return user


def get_business(session: Session, business_id: int) -> Business:
    business = session.get(Business, business_id)
    if not business:
        raise BusinessNotFound(f"Business {business_id} not found")
    return business


def get_offering(session: Session, offering_id: int) -> Offering:
    offering = session.get(Offering, offering_id)
    if not offering or not offering.active:
        raise OfferingNotFound(f"Offering {offering_id} not found or inactive")
    return offering


def require_owner(business: Business, actor_id: int, action: str) -> None:
    if business.owner_id != actor_id:
        raise ForbiddenError(f"Only the business owner can {action}")
