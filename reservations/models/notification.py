from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class NotificationKind(str, Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ALERT = "ALERT"


class Notification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="user.id", index=True)

    title: str
    message: str
    kind: NotificationKind = NotificationKind.INFO
    target_url: Optional[str] = None

    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=datetime.now, index=True)
