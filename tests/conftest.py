"""
Shared fixtures: an isolated settings object, in-memory capabilities and
a development API instance reached through httpx's ASGI transport.
"""

from typing import Optional

import httpx
import pytest

from tiffin.context import build_context
from tiffin.core.config import Settings
from tiffin.mock_api import create_app
from tiffin.schemas import FoodCreate, FoodItem
from tiffin.services.location import FixedLocationProvider
from tiffin.services.notifications import MemoryNotifier
from tiffin.services.storage import MemorySessionStore


class RecordingTransport(httpx.AsyncBaseTransport):
    """Forwards to another transport and keeps every request it saw."""

    def __init__(self, inner: httpx.AsyncBaseTransport):
        self.inner = inner
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return await self.inner.handle_async_request(request)

    def paths(self, method: Optional[str] = None) -> list[str]:
        return [
            r.url.path for r in self.requests
            if method is None or r.method == method
        ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env_mode="development",
        api_base_url="http://testserver",
        session_file=":memory:",
        min_order_items=2,
        delivery_radius_km=10,
        restaurant_latitude=28.6139,
        restaurant_longitude=77.2090,
    )


@pytest.fixture
def mock_app(settings):
    return create_app(settings, seed=True)


@pytest.fixture
def backend(mock_app):
    return mock_app.state.backend


@pytest.fixture
def transport(mock_app) -> RecordingTransport:
    return RecordingTransport(httpx.ASGITransport(app=mock_app))


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


@pytest.fixture
def location(settings) -> FixedLocationProvider:
    return FixedLocationProvider(settings.restaurant_latitude, settings.restaurant_longitude)


@pytest.fixture
async def ctx(settings, store, location, notifier, transport):
    context = build_context(
        settings=settings,
        store=store,
        location=location,
        notifier=notifier,
        transport=transport,
    )
    yield context
    await context.aclose()


@pytest.fixture
def add_food(backend):
    """Put an item straight into the development API's catalog."""

    def _add(name: str, price: float, available: bool = True, category: str = "Tiffin") -> FoodItem:
        return backend.create_food(FoodCreate(
            name=name,
            description=f"{name} of the day",
            price=price,
            category=category,
            available=available,
        ))

    return _add
