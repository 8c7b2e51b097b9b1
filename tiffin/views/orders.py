"""
My Orders View

The signed-in customer's order history, newest first.
"""

import logging

from tiffin.context import AppContext
from tiffin.errors import StorefrontError
from tiffin.schemas import Order

logger = logging.getLogger(__name__)


class OrdersView:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.orders: list[Order] = []
        self.is_loading = True

    async def load(self) -> bool:
        self.is_loading = True
        try:
            orders = await self.ctx.api.list_user_orders()
        except StorefrontError as e:
            logger.warning(f"Order history load failed: {e!r}")
            self.ctx.notifier.error("Error loading orders", "Please try again later")
            return False
        finally:
            self.is_loading = False

        self.orders = sorted(orders, key=lambda order: order.created_at, reverse=True)
        return True
