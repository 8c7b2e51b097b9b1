"""
Notifier Factory

Returns the console notifier used by the terminal storefront.
Tests construct MemoryNotifier directly.
"""

import logging
from functools import lru_cache

from tiffin.services.notifications.base import BaseNotifier, Notification, Variant
from tiffin.services.notifications.console import ConsoleNotifier
from tiffin.services.notifications.memory import MemoryNotifier

logger = logging.getLogger(__name__)


@lru_cache()
def get_notifier() -> BaseNotifier:
    """Get the configured notifier."""
    logger.debug("Notifier: Using ConsoleNotifier")
    return ConsoleNotifier()


def reset_notifier() -> None:
    """Clear the cached notifier instance."""
    get_notifier.cache_clear()


__all__ = [
    "get_notifier",
    "reset_notifier",
    "BaseNotifier",
    "Notification",
    "Variant",
    "ConsoleNotifier",
    "MemoryNotifier",
]
