"""
Authentication State Holder

Process-wide session: the signed-in user and their token. Restored from
the session store at startup and written back on every change.

Invariant: a user is held if and only if a token is held.

Only ``login``, ``logout`` and ``expire`` (the API client's unauthorized
handler) mutate this state.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from tiffin.schemas import Role, User
from tiffin.services.storage import BaseSessionStore, TOKEN_KEY, ROLE_KEY, USER_KEY

logger = logging.getLogger(__name__)


class AuthState:
    """
    Session holder backed by a session store.

    Example:
        >>> auth = AuthState(MemorySessionStore())
        >>> auth.is_authenticated
        False
        >>> auth.login("abc123", user)
        >>> auth.user.name
        'Asha'
    """

    def __init__(self, store: BaseSessionStore):
        self.store = store
        self._token: Optional[str] = None
        self._user: Optional[User] = None
        self._restore()

    def _restore(self) -> None:
        """Load token and user from storage, discarding partial sessions."""
        token = self.store.get(TOKEN_KEY)
        raw_user = self.store.get(USER_KEY)

        if not token and not raw_user:
            return

        user = None
        if token and raw_user:
            try:
                user = User.model_validate(json.loads(raw_user))
            except (ValueError, PydanticValidationError) as e:
                logger.warning(f"Discarding unreadable cached user: {e}")

        if user is None:
            logger.info("Persisted session incomplete; starting signed out")
            self.store.clear_session()
            return

        self._token = token
        self._user = user
        logger.info(f"Session restored for {user.email} ({user.role.value})")

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def login(self, token: str, user: User) -> None:
        """Start a session and persist it."""
        if not token:
            raise ValueError("token must not be empty")

        self.store.set(TOKEN_KEY, token)
        self.store.set(ROLE_KEY, user.role.value)
        self.store.set(USER_KEY, user.model_dump_json(by_alias=True))
        self._token = token
        self._user = user
        logger.info(f"Signed in as {user.email} ({user.role.value})")

    def logout(self) -> None:
        """End the session and wipe it from storage."""
        if self._user is not None:
            logger.info(f"Signed out {self._user.email}")
        self._token = None
        self._user = None
        self.store.clear_session()

    def expire(self) -> None:
        """Drop a session the API no longer accepts."""
        if self._user is not None:
            logger.warning(f"Session for {self._user.email} expired")
        self._token = None
        self._user = None
        self.store.clear_session()

    # =========================================================================
    # READ-ONLY VIEW
    # =========================================================================

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def role(self) -> Optional[Role]:
        return self._user.role if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.is_admin
