"""
Notifier Abstract Base Class

Defines the interface views use to show short title + description
notifications ("toasts") to the user.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tiffin.errors import StorefrontError


class Variant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """A single toast."""
    title: str
    description: str = ""
    variant: Variant = Variant.DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == Variant.DESTRUCTIVE


class BaseNotifier(ABC):
    """Abstract base class for notifiers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the notifier name."""
        pass

    @abstractmethod
    def show(self, notification: Notification) -> None:
        """Present a notification to the user."""
        pass

    def notify(
        self,
        title: str,
        description: str = "",
        variant: Variant = Variant.DEFAULT,
    ) -> Notification:
        """Build and show a notification."""
        notification = Notification(title=title, description=description, variant=variant)
        self.show(notification)
        return notification

    def error(
        self,
        title: str,
        description: str = "",
    ) -> Notification:
        """Show a destructive notification."""
        return self.notify(title, description, Variant.DESTRUCTIVE)

    def failure(
        self,
        exc: StorefrontError,
        title: Optional[str] = None,
        fallback: Optional[str] = None,
    ) -> Notification:
        """
        Turn a caught storefront error into a destructive notification.

        Args:
            exc: The caught error
            title: Overrides the error's own title
            fallback: Description used when the error has no server message
        """
        description = exc.message
        if fallback and exc.message == exc.default_message:
            description = fallback
        return self.error(title or exc.title, description)
