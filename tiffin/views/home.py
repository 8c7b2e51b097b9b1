"""
Home View

Customer storefront: today's menu (available items only) with per-item
ordering controls, and the cart with its totals and the place-order
action.
"""

import logging
from typing import Optional

from tiffin.context import AppContext
from tiffin.errors import StorefrontError
from tiffin.schemas import FoodItem, Order
from tiffin.state.cart import CartLine
from tiffin.views.food_card import FoodCardState

logger = logging.getLogger(__name__)


class HomeView:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.foods: list[FoodItem] = []
        self.cards: dict[str, FoodCardState] = {}
        self.is_loading = True

    async def load(self) -> None:
        """Fetch the catalog, keeping only items that can be ordered."""
        self.is_loading = True
        try:
            foods = await self.ctx.api.list_foods()
        except StorefrontError as e:
            logger.warning(f"Catalog load failed: {e!r}")
            self.ctx.notifier.error("Error loading foods", "Please try again later")
            return
        finally:
            self.is_loading = False

        self.foods = [food for food in foods if food.available]
        self.cards = {
            food.id: FoodCardState(food, self.ctx.cart.quantity_of(food.id))
            for food in self.foods
        }
        logger.info(f"Menu loaded: {len(self.foods)} of {len(foods)} items available")

    def find(self, food_id: str) -> Optional[FoodItem]:
        return next((food for food in self.foods if food.id == food_id), None)

    # =========================================================================
    # CART
    # =========================================================================

    def add_to_cart(self, food: FoodItem, quantity: int) -> CartLine:
        line = self.ctx.cart.add(food, quantity)
        self.ctx.notifier.notify(
            "Added to cart",
            f"{quantity}x {food.name} added to your cart",
        )
        return line

    def update_quantity(self, food_id: str, quantity: int) -> None:
        self.ctx.cart.set_quantity(food_id, quantity)

    def remove_from_cart(self, food_id: str) -> None:
        self.ctx.cart.remove(food_id)

    @property
    def cart_lines(self) -> list[CartLine]:
        return self.ctx.cart.lines

    @property
    def total_amount(self) -> float:
        return self.ctx.cart.total_amount

    @property
    def total_items(self) -> int:
        return self.ctx.cart.total_items

    @property
    def can_place_order(self) -> bool:
        return (
            self.total_items >= self.ctx.settings.min_order_items
            and not self.ctx.checkout.in_progress
        )

    async def place_order(self) -> Optional[Order]:
        order = await self.ctx.checkout.submit()
        if order is not None:
            for card in self.cards.values():
                card.quantity = 0
        return order
