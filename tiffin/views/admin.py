"""
Admin View

Catalog administration and the order list.

Every successful mutation is followed by a full reload of foods and
orders rather than patching local state. Deleting asks for confirmation
before the request is sent.
"""

import asyncio
import logging
from typing import Callable, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from tiffin.context import AppContext
from tiffin.errors import StorefrontError, ValidationError
from tiffin.schemas import FoodCreate, FoodItem, FoodUpdate, Order

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]


def _price_text(price: float) -> str:
    """Full-precision price text, without a trailing '.0' on whole amounts."""
    text = repr(float(price))
    return text[:-2] if text.endswith(".0") else text


class FoodForm(BaseModel):
    """Add/edit form contents as typed by the admin (price is raw text)."""
    name: str = ""
    description: str = ""
    price: str = ""
    category: str = ""
    image: str = ""
    available: bool = True

    @classmethod
    def from_food(cls, food: FoodItem) -> "FoodForm":
        return cls(
            name=food.name,
            description=food.description,
            price=_price_text(food.price),
            category=food.category,
            image=food.image or "",
            available=food.available,
        )

    def _fields(self) -> dict:
        try:
            price = float(self.price)
        except ValueError:
            raise ValidationError("Price must be a number", title="Error saving food item")
        return {
            "name": self.name.strip(),
            "description": self.description.strip(),
            "price": price,
            "category": self.category.strip(),
            "image": self.image.strip() or None,
            "available": self.available,
        }

    @staticmethod
    def _describe(e: PydanticValidationError) -> str:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "form"
        return f"{field}: {first.get('msg', 'invalid value')}"

    def to_create(self) -> FoodCreate:
        try:
            return FoodCreate(**self._fields())
        except PydanticValidationError as e:
            raise ValidationError(self._describe(e), title="Error saving food item")

    def to_update(self) -> FoodUpdate:
        try:
            return FoodUpdate(**self._fields())
        except PydanticValidationError as e:
            raise ValidationError(self._describe(e), title="Error saving food item")


class AdminView:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.foods: list[FoodItem] = []
        self.orders: list[Order] = []
        self.is_loading = True
        self.is_dialog_open = False
        self.editing: Optional[FoodItem] = None
        self.form = FoodForm()

    async def load(self) -> bool:
        """Fetch every food item (available or not) and every order."""
        self.is_loading = True
        try:
            self.foods, self.orders = await asyncio.gather(
                self.ctx.api.list_foods(),
                self.ctx.api.list_orders(),
            )
        except StorefrontError as e:
            logger.warning(f"Admin data load failed: {e!r}")
            self.ctx.notifier.error("Error loading data", "Please try again later")
            return False
        finally:
            self.is_loading = False

        logger.info(f"Admin data loaded: {len(self.foods)} foods, {len(self.orders)} orders")
        return True

    # =========================================================================
    # FORM
    # =========================================================================

    def start_create(self) -> None:
        self.editing = None
        self.form = FoodForm()
        self.is_dialog_open = True

    def start_edit(self, food: FoodItem) -> None:
        self.editing = food
        self.form = FoodForm.from_food(food)
        self.is_dialog_open = True

    def close_dialog(self) -> None:
        self.is_dialog_open = False
        self.editing = None
        self.form = FoodForm()

    @property
    def dialog_title(self) -> str:
        return "Edit Food Item" if self.editing else "Add New Food Item"

    async def submit(self) -> Optional[FoodItem]:
        """Create or update from the form, then reload."""
        try:
            if self.editing is not None:
                saved = await self.ctx.api.update_food(self.editing.id, self.form.to_update())
                self.ctx.notifier.notify("Food item updated", "Successfully updated the food item")
            else:
                saved = await self.ctx.api.create_food(self.form.to_create())
                self.ctx.notifier.notify("Food item added", "Successfully added new food item")
        except StorefrontError as e:
            self.ctx.notifier.failure(e, title="Error saving food item", fallback="Please try again")
            return None

        logger.info(f"Saved food item {saved.id} ({saved.name})")
        self.close_dialog()
        await self.load()
        return saved

    async def delete(self, food: FoodItem, confirm: ConfirmFn) -> bool:
        """Delete after an explicit confirmation, then reload."""
        if not confirm(f'Are you sure you want to delete "{food.name}"?'):
            logger.debug(f"Delete of {food.id} cancelled")
            return False

        try:
            await self.ctx.api.delete_food(food.id)
        except StorefrontError as e:
            self.ctx.notifier.failure(e, title="Error deleting food item", fallback="Please try again")
            return False

        logger.info(f"Deleted food item {food.id} ({food.name})")
        self.ctx.notifier.notify("Food item deleted", "Successfully deleted the food item")
        await self.load()
        return True

    def find(self, food_id: str) -> Optional[FoodItem]:
        return next((food for food in self.foods if food.id == food_id), None)
