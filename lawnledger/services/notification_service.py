"""
User-facing notification channel

Every completed board operation emits exactly one success or error
notification naming the affected entity where applicable. Notifications are
kept in a bounded history so the frontend can poll them.
"""

import logging
from collections import deque
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field

from ..config import NOTIFICATION_HISTORY_LIMIT

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    level: NotificationLevel
    message: str
    created_at: datetime = Field(default_factory=datetime.now)


class OperationStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"  # Gateway failure
    REJECTED = "rejected"  # Local validation failure, no gateway call issued
    CANCELLED = "cancelled"  # Confirmation declined, no gateway call issued
    UNCHANGED = "unchanged"  # Nothing to do (e.g. same-date drop)


class OperationResult(BaseModel):
    """Outcome of a board operation"""

    status: OperationStatus
    message: str = ""
    entity_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status in (OperationStatus.SUCCEEDED, OperationStatus.UNCHANGED)


class Notifier:
    """Bounded, in-memory notification channel with optional sinks"""

    def __init__(self, limit: int = NOTIFICATION_HISTORY_LIMIT):
        self._history: deque[Notification] = deque(maxlen=limit)
        self._sinks: list[Callable[[Notification], None]] = []

    def add_sink(self, sink: Callable[[Notification], None]) -> None:
        self._sinks.append(sink)

    def success(self, message: str, entity_id: Optional[int] = None) -> OperationResult:
        self._emit(Notification(level=NotificationLevel.SUCCESS, message=message))
        return OperationResult(status=OperationStatus.SUCCEEDED, message=message, entity_id=entity_id)

    def failure(self, message: str, entity_id: Optional[int] = None) -> OperationResult:
        self._emit(Notification(level=NotificationLevel.ERROR, message=message))
        return OperationResult(status=OperationStatus.FAILED, message=message, entity_id=entity_id)

    def rejected(self, message: str) -> OperationResult:
        """Inline validation message; surfaced to the user like any other error"""
        self._emit(Notification(level=NotificationLevel.ERROR, message=message))
        return OperationResult(status=OperationStatus.REJECTED, message=message)

    @property
    def history(self) -> list[Notification]:
        return list(self._history)

    @property
    def latest(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    def clear(self) -> None:
        self._history.clear()

    def _emit(self, notification: Notification) -> None:
        self._history.append(notification)
        for sink in self._sinks:
            try:
                sink(notification)
            except Exception as e:
                logger.warning(f"⚠️ Notification sink failed: {e}")


def cancelled(message: str) -> OperationResult:
    """Result for a destructive operation the user did not confirm"""
    return OperationResult(status=OperationStatus.CANCELLED, message=message)


def unchanged(message: str = "") -> OperationResult:
    return OperationResult(status=OperationStatus.UNCHANGED, message=message)
