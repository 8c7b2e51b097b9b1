"""
Order Submission Flow

Turns the cart into an order:
    1. Check the minimum item count locally (no network call on failure)
    2. Acquire the customer's coordinates (terminal on failure, no retry)
    3. Submit lines + coordinates to the API
    4. On success clear the cart and confirm
    5. On failure report a message matching the cause; the cart is untouched

Each attempt carries an idempotency key. The key is reused for as long as
the cart is unchanged, so resubmitting after a network failure lets the
API recognise an order it already recorded.
"""

import logging
import uuid
from typing import Optional

from tiffin.api import ApiClient
from tiffin.errors import LocationUnavailable, OutOfRange, StorefrontError, ValidationError
from tiffin.schemas import Order, OrderCreate
from tiffin.services.location import BaseLocationProvider
from tiffin.services.notifications import BaseNotifier
from tiffin.state.cart import Cart

logger = logging.getLogger(__name__)


class OrderSubmission:
    """
    Places orders from a cart.

    Attributes:
        min_items: Minimum number of units per order
        delivery_radius_km: Radius quoted when the API rejects the location
        in_progress: True while an attempt is awaiting location or the API
    """

    def __init__(
        self,
        api: ApiClient,
        cart: Cart,
        location: BaseLocationProvider,
        notifier: BaseNotifier,
        min_items: int = 2,
        delivery_radius_km: float = 10.0,
    ):
        self.api = api
        self.cart = cart
        self.location = location
        self.notifier = notifier
        self.min_items = min_items
        self.delivery_radius_km = delivery_radius_km
        self.in_progress = False
        self._pending_key: Optional[tuple[int, str]] = None

    def idempotency_key(self) -> str:
        """Key for the current cart contents; stable until the cart changes."""
        if self._pending_key is None or self._pending_key[0] != self.cart.revision:
            self._pending_key = (self.cart.revision, uuid.uuid4().hex)
        return self._pending_key[1]

    async def submit(self) -> Optional[Order]:
        """
        Run one submission attempt.

        Returns:
            The created order, or None if the attempt failed (the failure
            has already been reported through the notifier)
        """
        try:
            self.cart.ensure_minimum(self.min_items)
        except ValidationError as e:
            self.notifier.failure(e)
            return None

        self.in_progress = True
        try:
            return await self._submit()
        finally:
            self.in_progress = False

    async def _submit(self) -> Optional[Order]:
        try:
            coords = await self.location.get_current_location()
        except LocationUnavailable as e:
            logger.info(f"Order not placed, location unavailable: {e.message}")
            self.notifier.error(
                "Location required",
                "Please enable location access to place orders",
            )
            return None

        payload = OrderCreate(
            items=self.cart.to_order_items(),
            user_location=coords.to_user_location(),
        )
        key = self.idempotency_key()

        try:
            order = await self.api.create_order(payload, idempotency_key=key)
        except OutOfRange:
            self.notifier.error(
                "Delivery unavailable",
                f"Sorry, we don't deliver to your location. Please try from a "
                f"location within {self.delivery_radius_km:g}km of our restaurant.",
            )
            return None
        except StorefrontError as e:
            logger.warning(f"Order submission failed: {e!r}")
            self.notifier.failure(e, title="Order failed", fallback="Please try again later")
            return None

        logger.info(
            f"Order {order.id} placed: {payload.total_items} items, "
            f"total {order.total_amount}"
        )
        self._pending_key = None
        self.cart.clear()
        self.notifier.notify(
            "Order placed successfully!",
            "Your delicious tiffin will be delivered soon",
        )
        return order
