"""Sign-in shortcuts used across the view tests."""

from tiffin.mock_api import DEMO_ADMIN
from tiffin.views import LoginView


async def sign_in_customer(ctx, email: str = "asha@tiffinbuddy.in") -> None:
    assert await LoginView(ctx).register("Asha Rao", email, "secret-pass")


async def sign_in_admin(ctx) -> None:
    assert await LoginView(ctx).login(DEMO_ADMIN["email"], DEMO_ADMIN["password"])
