"""
Session Store Factory

Provides a single entry point for obtaining the session store.
Uses the JSON file store unless SESSION_FILE is ":memory:".

Usage:
    from tiffin.services.storage import get_session_store

    store = get_session_store()
    token = store.get(TOKEN_KEY)
"""

import logging
from functools import lru_cache

from tiffin.core.config import get_settings
from tiffin.services.storage.base import (
    BaseSessionStore,
    TOKEN_KEY,
    ROLE_KEY,
    USER_KEY,
    SESSION_KEYS,
)
from tiffin.services.storage.memory import MemorySessionStore
from tiffin.services.storage.file import FileSessionStore

logger = logging.getLogger(__name__)

MEMORY_SENTINEL = ":memory:"


@lru_cache()
def get_session_store() -> BaseSessionStore:
    """
    Get the configured session store instance.

    Returns:
        BaseSessionStore: File-backed store, or in-memory for ":memory:"
    """
    settings = get_settings()

    if settings.session_file == MEMORY_SENTINEL:
        logger.info("Session Store: Using MemorySessionStore")
        return MemorySessionStore()

    logger.info(f"Session Store: Using FileSessionStore ({settings.session_path})")
    return FileSessionStore(
        path=settings.session_path,
        lock_timeout=settings.session_lock_timeout,
    )


def reset_session_store() -> None:
    """Clear the cached session store instance."""
    get_session_store.cache_clear()
    logger.debug("Session store cache cleared")


__all__ = [
    "get_session_store",
    "reset_session_store",
    "BaseSessionStore",
    "MemorySessionStore",
    "FileSessionStore",
    "TOKEN_KEY",
    "ROLE_KEY",
    "USER_KEY",
    "SESSION_KEYS",
]
