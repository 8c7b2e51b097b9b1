"""
File Session Store with Concurrency Control

Persists session values to a small JSON file so a login survives across
CLI invocations, the way browser-local storage survives page loads.

Every read-modify-write happens under a file lock, so two terminals
signing in or out at the same time never interleave their writes.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from tiffin.services.storage.base import BaseSessionStore, SESSION_KEYS

logger = logging.getLogger(__name__)


class FileSessionStore(BaseSessionStore):
    """
    JSON-file-backed session store.

    Attributes:
        path: Location of the session file
        lock_timeout: Seconds to wait for the lock before giving up
    """

    def __init__(self, path: Path, lock_timeout: int = 10):
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self._lock = FileLock(str(self.path) + ".lock", timeout=lock_timeout)

        logger.debug(f"FileSessionStore initialized ({self.path})")

    @property
    def provider_name(self) -> str:
        return "file"

    def _ensure_dir(self) -> None:
        """Create the session directory if needed."""
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created session directory: {self.path.parent}")

    def _read(self) -> dict[str, str]:
        """Load the file, treating a missing or corrupt file as empty."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable session file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        """Atomically replace the session file."""
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        self._ensure_dir()
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        self._ensure_dir()
        try:
            with self._lock:
                data = self._read()
                data[key] = value
                self._write(data)
        except Timeout:
            logger.error(f"Timed out waiting for session lock after {self.lock_timeout}s")
            raise
        logger.debug(f"File store: set {key}")

    def remove(self, key: str) -> None:
        self._ensure_dir()
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def clear_session(self) -> None:
        self._ensure_dir()
        with self._lock:
            data = self._read()
            for key in list(data):
                if key in SESSION_KEYS:
                    del data[key]
            self._write(data)
