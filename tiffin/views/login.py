"""
Login / Register View

Credential forms that populate the auth state holder and send the user
to the landing page for their role.
"""

import logging

from tiffin.context import AppContext
from tiffin.errors import StorefrontError
from tiffin.schemas import AuthResponse, Role

logger = logging.getLogger(__name__)


class LoginView:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.is_loading = False

    def _start_session(self, response: AuthResponse) -> None:
        self.ctx.auth.login(response.token, response.user)
        self.ctx.navigator.navigate(self.ctx.navigator.home_for_role())

    async def login(self, email: str, password: str) -> bool:
        """Sign in. Returns True on success."""
        self.is_loading = True
        try:
            response = await self.ctx.api.login(email, password)
        except StorefrontError as e:
            self.ctx.notifier.failure(e, title="Login failed", fallback="Invalid credentials")
            return False
        finally:
            self.is_loading = False

        self._start_session(response)
        self.ctx.notifier.notify("Welcome back!", "Successfully logged in.")
        return True

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Role = Role.CUSTOMER,
    ) -> bool:
        """Create an account and sign in. Returns True on success."""
        self.is_loading = True
        try:
            response = await self.ctx.api.register(name, email, password, role)
        except StorefrontError as e:
            self.ctx.notifier.failure(e, title="Registration failed", fallback="Please try again")
            return False
        finally:
            self.is_loading = False

        self._start_session(response)
        self.ctx.notifier.notify(
            "Account created!",
            f"Welcome to {self.ctx.settings.app_name}.",
        )
        return True
