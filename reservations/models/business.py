from typing import Optional
from sqlmodel import SQLModel, Field


class Business(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    owner_id: int = Field(foreign_key="user.id", index=True)


class Offering(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", index=True)

    name: str
    price: float
    duration_minutes: int = Field(gt=0)
    # stored for display, does not extend the reserved slot
    buffer_time_minutes: int = 0
    active: bool = True
