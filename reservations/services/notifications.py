"""
Outbound notifications.

The booking engine emits NotificationMessage values after its transaction has
committed. A Notifier decides when they are delivered; delivery problems are
logged and never reach the caller.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from fastapi import BackgroundTasks
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from reservations.core.exceptions import ForbiddenError, NotificationNotFound
from reservations.models.notification import Notification, NotificationKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationMessage:
    user_id: int
    title: str
    message: str
    kind: NotificationKind = NotificationKind.INFO
    target_url: Optional[str] = None


class Notifier(ABC):
    @abstractmethod
    def notify(self, message: NotificationMessage) -> None:
        """Hand a message over for delivery; must not block on it."""


class RecordingNotifier(Notifier):
    """Keeps messages in memory; used by scripts and tests."""

    def __init__(self):
        self.messages: List[NotificationMessage] = []

    def notify(self, message: NotificationMessage) -> None:
        self.messages.append(message)


class DatabaseNotificationSink:
    """Stores a message as a Notification row using its own session."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def deliver(self, message: NotificationMessage) -> None:
        try:
            with Session(self.engine) as session:
                session.add(
                    Notification(
                        user_id=message.user_id,
                        title=message.title,
                        message=message.message,
                        kind=message.kind,
                        target_url=message.target_url,
                    )
                )
                session.commit()
        except Exception:
            logger.exception("Failed to deliver notification %r to user %s", message.title, message.user_id)


class BackgroundNotifier(Notifier):
    """Queues delivery on FastAPI background tasks, which run after the response is sent."""

    def __init__(self, background_tasks: BackgroundTasks, sink: DatabaseNotificationSink):
        self.background_tasks = background_tasks
        self.sink = sink

    def notify(self, message: NotificationMessage) -> None:
        self.background_tasks.add_task(self.sink.deliver, message)


# =========================
# INBOX
# =========================
def list_notifications(session: Session, user_id: int, limit: int = 10) -> List[Notification]:
    return session.exec(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
    ).all()


def count_unread(session: Session, user_id: int) -> int:
    return len(
        session.exec(
            select(Notification.id).where(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            )
        ).all()
    )


def mark_as_read(session: Session, notification_id: int, actor_id: int) -> Notification:
    notification = session.get(Notification, notification_id)
    if not notification:
        raise NotificationNotFound(f"Notification {notification_id} not found")

    if notification.user_id != actor_id:
        raise ForbiddenError("Not authorized to access this notification")

    notification.is_read = True
    session.add(notification)
    session.commit()
    session.refresh(notification)
    return notification


def mark_all_as_read(session: Session, user_id: int) -> int:
    unread = session.exec(
        select(Notification).where(
            Notification.user_id == user_id,
            Notification.is_read == False,  # noqa: E712
        )
    ).all()

    for notification in unread:
        notification.is_read = True
        session.add(notification)
    session.commit()
    return len(unread)


def format_when(value: datetime) -> str:
    return value.strftime("%b %d, %Y at %H:%M")
