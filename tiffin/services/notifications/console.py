"""
Console Notifier

Prints toasts to the terminal. Used by the CLI.
"""

import logging
import sys
from typing import TextIO, Optional

from tiffin.services.notifications.base import BaseNotifier, Notification

logger = logging.getLogger(__name__)


class ConsoleNotifier(BaseNotifier):
    """Writes each notification as a one-line banner plus description."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    @property
    def provider_name(self) -> str:
        return "console"

    def show(self, notification: Notification) -> None:
        icon = "❌" if notification.is_error else "✅"
        print(f"{icon} {notification.title}", file=self.stream)
        if notification.description:
            print(f"   {notification.description}", file=self.stream)

        log = logger.warning if notification.is_error else logger.info
        log(f"Toast: {notification.title} - {notification.description}")
