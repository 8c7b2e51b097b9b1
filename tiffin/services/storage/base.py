"""
Session Store Abstract Base Class

Defines the interface for durable client-side key/value storage, the
equivalent of browser-local storage. The auth state holder and the API
client read the session token from here; nothing else is persisted.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from typing import Optional


# Keys shared by the auth state holder and the API client
TOKEN_KEY = "authToken"
ROLE_KEY = "userRole"
USER_KEY = "authUser"

SESSION_KEYS = (TOKEN_KEY, ROLE_KEY, USER_KEY)


class BaseSessionStore(ABC):
    """
    Abstract base class for session storage.

    Values are plain strings, as in browser storage. Implementations must
    make ``set`` and ``remove`` durable before returning.

    Example:
        >>> store = get_session_store()
        >>> store.set(TOKEN_KEY, "abc123")
        >>> store.get(TOKEN_KEY)
        'abc123'
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the storage backend.

        Returns:
            str: Backend name (e.g., "memory", "file")
        """
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Missing keys are ignored."""
        pass

    def clear_session(self) -> None:
        """Remove every session key in one go."""
        for key in SESSION_KEYS:
            self.remove(key)
