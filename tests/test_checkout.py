"""Order submission flow against the development API."""

import httpx
import pytest

from tiffin.services.location import FixedLocationProvider, UnavailableLocationProvider
from tiffin.views import HomeView

from tests.helpers import sign_in_customer


@pytest.fixture
async def customer(ctx):
    await sign_in_customer(ctx)
    return ctx


async def test_single_item_is_rejected_without_network_call(customer, add_food, transport, notifier):
    food = add_food("Dal", 50)
    customer.cart.add(food, 1)
    sent_before = len(transport.requests)

    order = await customer.checkout.submit()

    assert order is None
    assert len(transport.requests) == sent_before
    assert notifier.last.title == "Minimum order required"
    assert notifier.last.is_error
    assert customer.cart.total_items == 1


async def test_successful_order_clears_cart(customer, add_food, transport, notifier, backend):
    a = add_food("A", 50)
    b = add_food("B", 30)
    customer.cart.add(a, 1)
    customer.cart.add(b, 2)

    order = await customer.checkout.submit()

    assert order is not None
    assert order.total_amount == 110
    assert len(order.items) == 2
    assert {(i.food_id, i.quantity) for i in order.items} == {(a.id, 1), (b.id, 2)}
    assert not customer.cart
    assert notifier.last.title == "Order placed successfully!"
    assert transport.paths("POST").count("/orders") == 1
    assert transport.requests[-1].headers.get("Idempotency-Key")
    assert backend.orders[-1].id == order.id


async def test_location_denied_leaves_cart_untouched(settings, store, notifier, transport, add_food):
    from tiffin.context import build_context

    ctx = build_context(
        settings=settings,
        store=store,
        location=UnavailableLocationProvider(),
        notifier=notifier,
        transport=transport,
    )
    async with ctx:
        await sign_in_customer(ctx)
        ctx.cart.add(add_food("A", 50), 2)

        order = await ctx.checkout.submit()

    assert order is None
    assert ctx.cart.total_items == 2
    assert notifier.last.title == "Location required"
    assert "enable location" in notifier.last.description
    assert "/orders" not in transport.paths("POST")
    assert not ctx.checkout.in_progress


async def test_out_of_range_reports_delivery_radius(customer, add_food, notifier, backend):
    customer.checkout.location = FixedLocationProvider(19.0760, 72.8777)
    customer.cart.add(add_food("A", 50), 2)

    order = await customer.checkout.submit()

    assert order is None
    assert notifier.last.title == "Delivery unavailable"
    assert "10km" in notifier.last.description
    assert customer.cart.total_items == 2
    assert backend.orders == []


async def test_generic_failure_keeps_cart(customer, add_food, notifier):
    food = add_food("A", 50)
    customer.cart.add(food, 2)
    customer.cart.add(add_food("Gone", 20, available=False), 1)

    order = await customer.checkout.submit()

    assert order is None
    assert notifier.last.title == "Order failed"
    assert "not available" in notifier.last.description
    assert customer.cart.total_items == 3


async def test_key_is_reused_until_cart_changes(customer, add_food):
    food = add_food("A", 50)
    customer.cart.add(food, 2)
    first = customer.checkout.idempotency_key()
    assert customer.checkout.idempotency_key() == first

    customer.cart.add(food, 1)
    assert customer.checkout.idempotency_key() != first


class DropFirstOrderResponse(httpx.AsyncBaseTransport):
    """Lets the first order reach the API, then loses its response."""

    def __init__(self, inner):
        self.inner = inner
        self.dropped = False

    async def handle_async_request(self, request):
        response = await self.inner.handle_async_request(request)
        if request.url.path == "/orders" and request.method == "POST" and not self.dropped:
            self.dropped = True
            await response.aread()
            raise httpx.ReadError("connection reset", request=request)
        return response


async def test_retry_after_lost_response_does_not_duplicate(
    settings, store, location, notifier, mock_app, add_food, backend
):
    from tiffin.context import build_context

    ctx = build_context(
        settings=settings,
        store=store,
        location=location,
        notifier=notifier,
        transport=DropFirstOrderResponse(httpx.ASGITransport(app=mock_app)),
    )
    async with ctx:
        await sign_in_customer(ctx)
        ctx.cart.add(add_food("A", 50), 2)

        assert await ctx.checkout.submit() is None
        assert notifier.last.title == "Order failed"
        assert ctx.cart.total_items == 2

        order = await ctx.checkout.submit()

    assert order is not None
    assert len(backend.orders) == 1
    assert backend.orders[0].id == order.id


async def test_place_order_resets_card_quantities(customer, add_food):
    add_food("A", 50)
    view = HomeView(customer)
    await view.load()
    card = next(iter(view.cards.values()))
    card.increment()
    card.increment()
    assert card.add_to_cart(view.add_to_cart)

    order = await view.place_order()

    assert order is not None
    assert all(c.quantity == 0 for c in view.cards.values())
    assert view.total_items == 0
