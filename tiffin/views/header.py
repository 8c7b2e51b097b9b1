"""
Header

Top bar: who is signed in, the cart badge for customers, and logout.
"""

from typing import Optional

from tiffin.context import AppContext
from tiffin.navigation import LOGIN
from tiffin.schemas import Role


class Header:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx

    @property
    def user_name(self) -> Optional[str]:
        user = self.ctx.auth.user
        return user.name if user else None

    @property
    def role(self) -> Optional[Role]:
        return self.ctx.auth.role

    @property
    def show_cart(self) -> bool:
        return self.ctx.auth.role == Role.CUSTOMER

    @property
    def cart_count(self) -> int:
        return self.ctx.cart.total_items if self.show_cart else 0

    def logout(self) -> str:
        self.ctx.auth.logout()
        self.ctx.cart.clear()
        return self.ctx.navigator.navigate(LOGIN)
