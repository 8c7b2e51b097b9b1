"""
Cart State

Client-held selection of catalog items waiting to be ordered. Lives in
memory only and is never persisted.

Invariants:
    - At most one line per food id
    - No line with quantity 0 (setting 0 removes the line)
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from tiffin.errors import ValidationError
from tiffin.schemas import FoodItem, OrderItemCreate

logger = logging.getLogger(__name__)


@dataclass
class CartLine:
    """A food snapshot and how many of it the customer wants."""
    food: FoodItem
    quantity: int

    @property
    def food_id(self) -> str:
        return self.food.id

    @property
    def subtotal(self) -> float:
        return round(self.food.price * self.quantity, 2)


class Cart:
    """Ordered collection of cart lines keyed by food id."""

    def __init__(self):
        self._lines: dict[str, CartLine] = {}
        self.revision = 0

    def _touch(self) -> None:
        self.revision += 1

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add(self, food: FoodItem, quantity: int = 1) -> CartLine:
        """Insert a line or grow an existing one by ``quantity``."""
        if quantity <= 0:
            raise ValueError("quantity must be positive")

        line = self._lines.get(food.id)
        if line is None:
            line = CartLine(food=food, quantity=quantity)
            self._lines[food.id] = line
        else:
            line.quantity += quantity
        self._touch()
        logger.debug(f"Cart: {food.name} x{line.quantity}")
        return line

    def set_quantity(
        self,
        food_id: str,
        quantity: int,
        food: Optional[FoodItem] = None,
    ) -> Optional[CartLine]:
        """
        Set a line's quantity; 0 removes it.

        A food id not in the cart is only inserted when its FoodItem is
        supplied, otherwise the call is a no-op.
        """
        if quantity < 0:
            raise ValueError("quantity must not be negative")
        if quantity == 0:
            self.remove(food_id)
            return None

        line = self._lines.get(food_id)
        if line is None:
            if food is None:
                return None
            return self.add(food, quantity)

        if line.quantity != quantity:
            line.quantity = quantity
            self._touch()
        return line

    def remove(self, food_id: str) -> None:
        """Delete a line if present."""
        if self._lines.pop(food_id, None) is not None:
            self._touch()

    def clear(self) -> None:
        """Empty the cart."""
        if self._lines:
            self._lines.clear()
            self._touch()

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def total_amount(self) -> float:
        return round(sum(line.food.price * line.quantity for line in self._lines.values()), 2)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def quantity_of(self, food_id: str) -> int:
        line = self._lines.get(food_id)
        return line.quantity if line else 0

    def ensure_minimum(self, min_items: int) -> None:
        """
        Raises:
            ValidationError: If fewer than ``min_items`` units are selected
        """
        if self.total_items < min_items:
            raise ValidationError(
                f"Please select at least {min_items} items to place an order",
                title="Minimum order required",
                code="min_items",
            )

    def to_order_items(self) -> list[OrderItemCreate]:
        return [
            OrderItemCreate(food_id=line.food_id, quantity=line.quantity, price=line.food.price)
            for line in self._lines.values()
        ]

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __contains__(self, food_id: object) -> bool:
        return food_id in self._lines

    def __bool__(self) -> bool:
        return bool(self._lines)
