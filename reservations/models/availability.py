from datetime import datetime
from enum import Enum

from sqlmodel import SQLModel


class BusyBlockKind(str, Enum):
    CLOSED = "CLOSED"
    BREAK = "BREAK"
    OCCUPIED = "OCCUPIED"


class BusyBlock(SQLModel):
    start: datetime
    end: datetime
    kind: BusyBlockKind
