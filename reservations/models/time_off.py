from typing import Optional
from datetime import datetime
from pydantic import NaiveDatetime
from sqlmodel import SQLModel, Field


class TimeOffBase(SQLModel):
    start_time: datetime = Field(index=True)
    end_time: datetime = Field(index=True)

    reason: str = "Time off"


class TimeOff(TimeOffBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    schedule_id: int = Field(foreign_key="schedulesettings.id", index=True)


class TimeOffCreate(TimeOffBase):
    start_time: NaiveDatetime
    end_time: NaiveDatetime
