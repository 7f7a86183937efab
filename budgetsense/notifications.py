"""Mini README: Transient user-visible notifications.

Structure:
    * Notification - immutable message with a level and timestamp.
    * NotificationChannel - bounded queue the interface drains and displays.

Failures that must not interrupt the user (a save that did not reach the
backend, a rejected template) are published here instead of being raised
through the interface. The channel keeps only the most recent messages.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, Dict, List, Optional

from .logging_utils import get_logger

LOGGER = get_logger(__name__)


class NotificationLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    """A single message for the notification toast."""

    level: NotificationLevel
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> Dict[str, str]:
        return {
            "level": self.level.value,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
        }


class NotificationChannel:
    """Bounded queue of notifications awaiting display."""

    def __init__(self, capacity: int = 20) -> None:
        self._messages: Deque[Notification] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._messages)

    def publish(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self._messages.append(notification)
        if level is NotificationLevel.ERROR:
            LOGGER.warning("User notified: %s", message)
        else:
            LOGGER.debug("User notified: %s", message)
        return notification

    def error(self, message: str) -> Notification:
        return self.publish(NotificationLevel.ERROR, message)

    def info(self, message: str) -> Notification:
        return self.publish(NotificationLevel.INFO, message)

    def latest(self) -> Optional[Notification]:
        return self._messages[-1] if self._messages else None

    def drain(self) -> List[Notification]:
        """Return and forget every pending notification, oldest first."""

        drained = list(self._messages)
        self._messages.clear()
        return drained
