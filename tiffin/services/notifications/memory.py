"""
Recording Notifier

Keeps every notification in a list instead of showing it.
Used by tests and by callers that render toasts themselves.
"""

import logging
from typing import Optional

from tiffin.services.notifications.base import BaseNotifier, Notification

logger = logging.getLogger(__name__)


class MemoryNotifier(BaseNotifier):
    """Collects notifications in order."""

    def __init__(self):
        self.notifications: list[Notification] = []

    @property
    def provider_name(self) -> str:
        return "memory"

    def show(self, notification: Notification) -> None:
        self.notifications.append(notification)
        logger.debug(f"Toast recorded: {notification.title}")

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]

    def clear(self) -> None:
        self.notifications.clear()
