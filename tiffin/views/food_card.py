"""
Food Card

Per-item ordering control shown on the catalog: a quantity selector and
an "Add to Cart" action.
"""

from typing import Callable

from tiffin.schemas import FoodItem


class FoodCardState:
    def __init__(self, food: FoodItem, quantity: int = 0):
        self.food = food
        self.quantity = max(0, quantity)

    def increment(self) -> int:
        self.quantity += 1
        return self.quantity

    def decrement(self) -> int:
        self.quantity = max(0, self.quantity - 1)
        return self.quantity

    @property
    def can_add(self) -> bool:
        return self.quantity > 0 and self.food.available

    @property
    def badge(self) -> str:
        return "Available" if self.food.available else "Unavailable"

    def add_to_cart(self, on_add: Callable[[FoodItem, int], object]) -> bool:
        """Hand the selected quantity to ``on_add``; False when disabled."""
        if not self.can_add:
            return False
        on_add(self.food, self.quantity)
        return True
