from datetime import date, time
from enum import Enum
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def of(cls, day: date) -> "DayOfWeek":
        # date.weekday(): 0=monday ... 6=sunday
        return list(cls)[day.weekday()]


class ScheduleSettings(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", unique=True, index=True)

    min_advance_booking_hours: Optional[int] = None
    max_advance_booking_days: Optional[int] = None

    # used when an offering does not say how long it takes
    default_slot_duration_minutes: int = 30

    # true = instant booking, false = owner must approve
    auto_confirm_appointments: bool = True


class WorkingDayBase(SQLModel):
    day_of_week: DayOfWeek

    is_day_off: bool = False

    start_time: Optional[time] = None
    end_time: Optional[time] = None

    # optional pause inside the working hours
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None

    @property
    def has_break(self) -> bool:
        return self.break_start_time is not None and self.break_end_time is not None


class WorkingDay(WorkingDayBase, table=True):
    __table_args__ = (UniqueConstraint("schedule_id", "day_of_week"),)

    id: Optional[int] = Field(default=None, primary_key=True)

    schedule_id: int = Field(foreign_key="schedulesettings.id", index=True)


class WorkingDayUpdate(WorkingDayBase):
    pass


class WorkingDayRead(WorkingDayBase):
    id: int


class ScheduleSettingsUpdate(SQLModel):
    min_advance_booking_hours: Optional[int] = Field(default=None, ge=0)
    max_advance_booking_days: Optional[int] = Field(default=None, ge=0)
    default_slot_duration_minutes: int = Field(default=30, gt=0)
    auto_confirm_appointments: bool = True

    working_days: List[WorkingDayUpdate]


class ScheduleSettingsRead(SQLModel):
    id: int
    business_id: int
    min_advance_booking_hours: Optional[int]
    max_advance_booking_days: Optional[int]
    default_slot_duration_minutes: int
    auto_confirm_appointments: bool

    working_days: List[WorkingDayRead]
