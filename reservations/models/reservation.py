from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import NaiveDatetime
from sqlmodel import SQLModel, Field


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Reservation(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", index=True)
    offering_id: int = Field(foreign_key="offering.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    start_time: datetime = Field(index=True)
    end_time: datetime = Field(index=True)

    status: ReservationStatus = Field(default=ReservationStatus.PENDING, index=True)

    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.now, index=True)

    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None  # customer | business
    cancel_reason: Optional[str] = None


class ReservationCreate(SQLModel):
    business_id: int
    offering_id: int
    # business-local wall-clock time, no UTC offset
    start_time: NaiveDatetime
    notes: Optional[str] = None


class ReasonRequest(SQLModel):
    reason: Optional[str] = None
