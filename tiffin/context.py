"""
Application Context

Builds the object graph every view works with: settings, session store,
auth state, cart, navigator, notifier, location provider, API client and
checkout. Views receive this container instead of reaching for globals.

Usage:
    from tiffin.context import build_context

    async with build_context() as ctx:
        await HomeView(ctx).load()
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from tiffin.api import ApiClient
from tiffin.checkout import OrderSubmission
from tiffin.core.config import Settings, get_settings
from tiffin.navigation import Navigator
from tiffin.services.location import BaseLocationProvider, get_location_provider
from tiffin.services.notifications import BaseNotifier, get_notifier
from tiffin.services.storage import BaseSessionStore, get_session_store
from tiffin.state import AuthState, Cart

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    store: BaseSessionStore
    auth: AuthState
    cart: Cart
    navigator: Navigator
    notifier: BaseNotifier
    location: BaseLocationProvider
    api: ApiClient
    checkout: OrderSubmission

    def handle_unauthorized(self) -> None:
        """Unauthorized-response side effect: drop the session, go to login."""
        self.auth.expire()
        self.navigator.redirect_to_login()

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> "AppContext":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def build_context(
    settings: Optional[Settings] = None,
    store: Optional[BaseSessionStore] = None,
    location: Optional[BaseLocationProvider] = None,
    notifier: Optional[BaseNotifier] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AppContext:
    """
    Wire up a context, falling back to the configured factories for any
    collaborator not supplied.
    """
    settings = settings or get_settings()
    store = store or get_session_store()
    location = location or get_location_provider()
    notifier = notifier or get_notifier()

    auth = AuthState(store)
    cart = Cart()
    navigator = Navigator(auth)
    api = ApiClient(
        settings.api_base_url,
        store,
        timeout=settings.api_timeout_seconds,
        transport=transport,
    )
    checkout = OrderSubmission(
        api,
        cart,
        location,
        notifier,
        min_items=settings.min_order_items,
        delivery_radius_km=settings.delivery_radius_km,
    )

    ctx = AppContext(
        settings=settings,
        store=store,
        auth=auth,
        cart=cart,
        navigator=navigator,
        notifier=notifier,
        location=location,
        api=api,
        checkout=checkout,
    )
    api.on_unauthorized = ctx.handle_unauthorized

    logger.debug(
        f"Context ready (store={store.provider_name}, "
        f"location={location.provider_name}, notifier={notifier.provider_name})"
    )
    return ctx
