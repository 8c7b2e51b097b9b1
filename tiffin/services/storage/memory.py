"""
In-Memory Session Store

Keeps session values in a dict for the lifetime of the process.
Used by tests and when SESSION_FILE is set to ":memory:".
"""

import logging
from typing import Optional

from tiffin.services.storage.base import BaseSessionStore

logger = logging.getLogger(__name__)


class MemorySessionStore(BaseSessionStore):
    """Dict-backed session store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    @property
    def provider_name(self) -> str:
        return "memory"

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        logger.debug(f"Memory store: set {key}")

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Copy of everything currently stored."""
        return dict(self._data)
