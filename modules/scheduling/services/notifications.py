"""
Toast-style notifications for the schedules tab.

Notifications are the only feedback channel for schedule actions: every
handler reports its outcome here instead of raising.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    type: NotificationType
    created_at: datetime = field(default_factory=datetime.now)


class NotificationCenter:
    """
    Holds the toast currently on screen plus a short history.

    A new notification replaces the current one, as a toast does.
    """

    def __init__(self, history_size: int = 50) -> None:
        self._current: Optional[Notification] = None
        self._history: deque[Notification] = deque(maxlen=history_size)

    @property
    def current(self) -> Optional[Notification]:
        return self._current

    @property
    def history(self) -> list[Notification]:
        return list(self._history)

    def notify(self, message: str, type: NotificationType) -> Notification:
        notification = Notification(message=message, type=type)
        self._current = notification
        self._history.append(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, NotificationType.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.notify(message, NotificationType.ERROR)

    def dismiss(self) -> None:
        self._current = None
