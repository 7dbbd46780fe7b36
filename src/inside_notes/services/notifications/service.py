from __future__ import annotations

import time
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Deque, List, Optional, Tuple
from uuid import uuid4

from src.inside_notes.config import settings
from src.inside_notes.domain.models.notification import Notification, NotificationType

Notifier = Callable[[Notification], None]


def make_notification(type_: NotificationType, message: str) -> Notification:
    return Notification(id=uuid4(), type=type_, message=message, created_at=datetime.now(timezone.utc))


class NotificationCenter:
    """Transient notification feed shown to the operator.

    Each notification is dismissed automatically once it is older than the
    configured TTL.
    """

    def __init__(
        self,
        *,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        max_items: int = 100,
    ) -> None:
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.notification_ttl_seconds
        self._clock = clock
        self._items: Deque[Tuple[float, Notification]] = deque(maxlen=max_items)

    def publish(self, notification: Notification) -> None:
        self._items.append((self._clock(), notification))

    def success(self, message: str) -> Notification:
        notification = make_notification(NotificationType.SUCCESS, message)
        self.publish(notification)
        return notification

    def error(self, message: str) -> Notification:
        notification = make_notification(NotificationType.ERROR, message)
        self.publish(notification)
        return notification

    def active(self) -> List[Notification]:
        now = self._clock()
        while self._items and now - self._items[0][0] >= self._ttl:
            self._items.popleft()
        return [notification for _, notification in self._items]

    def clear(self) -> None:
        self._items.clear()


notification_center = NotificationCenter()
