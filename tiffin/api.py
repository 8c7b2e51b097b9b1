"""
Ordering API Client

Thin async wrapper around the remote ordering API. This is the only
component in the storefront that talks to the network for persistence.

Cross-cutting behavior:
    - Every request carries ``Authorization: Bearer <token>`` when a token
      is present in the session store
    - Every 401 response clears the persisted session and fires the
      unauthorized handler (session teardown + redirect to login), once
      per response, whichever view issued the call
    - Failures are raised as the storefront error taxonomy

Usage:
    from tiffin.api import ApiClient

    async with ApiClient(settings.api_base_url, store) as api:
        foods = await api.list_foods()
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import httpx
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from tiffin.errors import (
    AuthenticationError,
    AuthorizationError,
    NetworkError,
    NotFound,
    OutOfRange,
    ServerError,
    StorefrontError,
    ValidationError,
)
from tiffin.schemas import (
    ApiErrorBody,
    AuthResponse,
    FoodCreate,
    FoodItem,
    FoodUpdate,
    LoginRequest,
    Order,
    OrderCreate,
    RegisterRequest,
    Role,
)
from tiffin.services.storage import BaseSessionStore, TOKEN_KEY

logger = logging.getLogger(__name__)

OUT_OF_RANGE_CODE = "out_of_range"
IDEMPOTENCY_HEADER = "Idempotency-Key"

_food_list = TypeAdapter(list[FoodItem])
_order_list = TypeAdapter(list[Order])


class ApiClient:
    """
    Client for the ordering API.

    Attributes:
        base_url: API origin
        store: Session store the bearer token is read from
        on_unauthorized: Called after the session store is cleared on a 401
        unauthorized_count: Number of 401 responses seen
    """

    def __init__(
        self,
        base_url: str,
        store: BaseSessionStore,
        on_unauthorized: Optional[Callable[[], None]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.store = store
        self.on_unauthorized = on_unauthorized
        self.unauthorized_count = 0

        client_kwargs: dict[str, Any] = {
            "base_url": base_url,
            "headers": {"Content-Type": "application/json"},
            "event_hooks": {
                "request": [self._attach_token],
                "response": [self._check_unauthorized],
            },
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(**client_kwargs)
        logger.debug(f"ApiClient initialized ({base_url})")

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # =========================================================================
    # HOOKS
    # =========================================================================

    async def _attach_token(self, request: httpx.Request) -> None:
        """Add the bearer token from the session store, if any."""
        # may block on the session file lock
        token = await asyncio.to_thread(self.store.get, TOKEN_KEY)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def _check_unauthorized(self, response: httpx.Response) -> None:
        """Tear the session down when the API rejects our credentials."""
        if response.status_code != 401:
            return

        self.unauthorized_count += 1
        logger.warning(
            f"401 from {response.request.method} {response.request.url.path}; "
            f"clearing session"
        )
        await asyncio.to_thread(self.store.clear_session)
        if self.on_unauthorized is not None:
            await asyncio.to_thread(self.on_unauthorized)

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    @staticmethod
    def _error_body(response: httpx.Response) -> ApiErrorBody:
        try:
            return ApiErrorBody.model_validate(response.json())
        except (ValueError, PydanticValidationError):
            return ApiErrorBody()

    def _error_for(self, response: httpx.Response) -> StorefrontError:
        """Map an error response onto the storefront error taxonomy."""
        body = self._error_body(response)
        status = response.status_code
        kwargs = {"status_code": status, "code": body.code}

        if status == 401:
            return AuthenticationError(body.text or "Your session has expired", **kwargs)
        if status == 403:
            return AuthorizationError(body.text, **kwargs)
        if status == 404:
            return NotFound(body.text, **kwargs)
        if status >= 500:
            return ServerError(body.text, **kwargs)
        if body.code and body.code.lower() == OUT_OF_RANGE_CODE:
            return OutOfRange(body.text, **kwargs)
        return ValidationError(body.text, **kwargs)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise on transport or HTTP failure."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {url} timed out: {e}")
            raise NetworkError("The server took too long to respond", code="timeout")
        except httpx.TransportError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise NetworkError(code="transport_error")

        if response.is_error:
            error = self._error_for(response)
            logger.info(f"{method} {url} -> {response.status_code} ({type(error).__name__})")
            raise error

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    @staticmethod
    def _parse(response: httpx.Response, parser: Callable[[Any], Any]) -> Any:
        try:
            return parser(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Malformed response from {response.request.url.path}: {e}")
            raise ServerError("Unexpected response from server", status_code=response.status_code)

    # =========================================================================
    # AUTH
    # =========================================================================

    async def login(self, email: str, password: str) -> AuthResponse:
        """
        Authenticate with email and password.

        Raises:
            AuthenticationError: If the server rejects the credentials
        """
        payload = LoginRequest.model_construct(email=email, password=password)
        try:
            response = await self._request("POST", "/auth/login", json=payload.to_wire())
        except ValidationError as e:
            raise AuthenticationError(
                e.message if e.message != e.default_message else None,
                status_code=e.status_code,
                code=e.code,
            )
        return self._parse(response, AuthResponse.model_validate)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Role = Role.CUSTOMER,
    ) -> AuthResponse:
        """
        Create an account and sign in.

        Raises:
            ValidationError: Duplicate email or invalid fields (server message)
        """
        payload = RegisterRequest.model_construct(
            name=name, email=email, password=password, role=Role.parse(role)
        )
        response = await self._request("POST", "/auth/register", json=payload.to_wire())
        return self._parse(response, AuthResponse.model_validate)

    # =========================================================================
    # CATALOG
    # =========================================================================

    async def list_foods(self) -> list[FoodItem]:
        """Every catalog item, available or not, in server order."""
        response = await self._request("GET", "/food")
        return self._parse(response, _food_list.validate_python)

    async def create_food(self, food: FoodCreate) -> FoodItem:
        response = await self._request("POST", "/food", json=food.to_wire())
        return self._parse(response, FoodItem.model_validate)

    async def update_food(self, food_id: str, changes: FoodUpdate) -> FoodItem:
        response = await self._request(
            "PUT", f"/food/{food_id}", json=changes.to_wire(exclude_unset=True)
        )
        return self._parse(response, FoodItem.model_validate)

    async def delete_food(self, food_id: str) -> None:
        await self._request("DELETE", f"/food/{food_id}")

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def create_order(
        self,
        order: OrderCreate,
        idempotency_key: Optional[str] = None,
    ) -> Order:
        """
        Submit an order.

        Raises:
            OutOfRange: Delivery location outside the service radius
            ValidationError: Too few items or malformed lines
        """
        headers = {IDEMPOTENCY_HEADER: idempotency_key} if idempotency_key else None
        response = await self._request("POST", "/orders", json=order.to_wire(), headers=headers)
        return self._parse(response, Order.model_validate)

    async def list_orders(self) -> list[Order]:
        """All orders (admin only)."""
        response = await self._request("GET", "/orders")
        return self._parse(response, _order_list.validate_python)

    async def list_user_orders(self) -> list[Order]:
        """Orders placed by the signed-in user."""
        response = await self._request("GET", "/orders/user")
        return self._parse(response, _order_list.validate_python)
