"""
Client-Side Routing

Tracks the current screen and applies the role guards the storefront uses
to decide what to show. The guards are a UI convenience only; the API is
the authority on what a user may do.

Routes:
    /login  - sign in / register (public)
    /       - catalog and cart (signed in)
    /orders - the customer's own orders (signed in)
    /admin  - catalog administration (admins)
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional

from tiffin.state.session import AuthState

logger = logging.getLogger(__name__)

LOGIN = "/login"
HOME = "/"
ORDERS = "/orders"
ADMIN = "/admin"

HISTORY_LIMIT = 50


@dataclass(frozen=True)
class Route:
    path: str
    requires_auth: bool = False
    admin_only: bool = False


ROUTES = {
    LOGIN: Route(LOGIN),
    HOME: Route(HOME, requires_auth=True),
    ORDERS: Route(ORDERS, requires_auth=True),
    ADMIN: Route(ADMIN, requires_auth=True, admin_only=True),
}


class Navigator:
    """
    Current route plus the most recent history (HISTORY_LIMIT entries).

    Example:
        >>> nav = Navigator(auth)
        >>> nav.navigate("/admin")   # as a customer
        '/'
    """

    def __init__(self, auth: AuthState, initial: str = HOME):
        self.auth = auth
        self.history: deque[str] = deque(maxlen=HISTORY_LIMIT)
        self.current = self.resolve(initial)
        self.history.append(self.current)

    def resolve(self, path: str) -> str:
        """Where a request for ``path`` actually lands for the current user."""
        route = ROUTES.get(path)
        if route is None:
            return HOME if self.auth.is_authenticated else LOGIN
        if route.requires_auth and not self.auth.is_authenticated:
            return LOGIN
        if route.admin_only and not self.auth.is_admin:
            return HOME
        return path

    def navigate(self, path: str) -> str:
        """Go to ``path`` (subject to guards) and return the landing route."""
        target = self.resolve(path)
        if target != path:
            logger.debug(f"Route guard: {path} -> {target}")
        self.current = target
        self.history.append(target)
        return target

    def redirect_to_login(self) -> None:
        """Forced navigation after the session is torn down."""
        logger.info("Redirecting to login")
        self.current = LOGIN
        self.history.append(LOGIN)

    def home_for_role(self) -> str:
        """Landing page after sign-in."""
        return ADMIN if self.auth.is_admin else HOME

    @property
    def previous(self) -> Optional[str]:
        return self.history[-2] if len(self.history) > 1 else None
