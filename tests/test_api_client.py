"""ApiClient: bearer token, 401 teardown, error mapping, parsing."""

import json
import threading

import httpx
import pytest

from tiffin.api import ApiClient, IDEMPOTENCY_HEADER
from tiffin.errors import (
    AuthenticationError,
    AuthorizationError,
    NetworkError,
    NotFound,
    OutOfRange,
    ServerError,
    ValidationError,
)
from tiffin.schemas import FoodUpdate, OrderCreate, OrderItemCreate, UserLocation
from tiffin.services.storage import MemorySessionStore, TOKEN_KEY, USER_KEY


def client_for(handler, store=None, on_unauthorized=None) -> ApiClient:
    return ApiClient(
        "http://api.test",
        store if store is not None else MemorySessionStore(),
        on_unauthorized=on_unauthorized,
        transport=httpx.MockTransport(handler),
    )


def food_json(food_id="f1", **overrides):
    data = {
        "_id": food_id,
        "name": "Veg Thali",
        "description": "Full meal",
        "price": 150,
        "category": "Thali",
        "available": True,
    }
    data.update(overrides)
    return data


async def test_attaches_bearer_token_when_present():
    seen = []

    def handler(request):
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json=[])

    store = MemorySessionStore()
    async with client_for(handler, store) as api:
        await api.list_foods()
        store.set(TOKEN_KEY, "tok-9")
        await api.list_foods()

    assert seen == [None, "Bearer tok-9"]


async def test_parses_underscore_ids():
    def handler(request):
        return httpx.Response(200, json=[food_json("abc"), food_json("def", available=False)])

    async with client_for(handler) as api:
        foods = await api.list_foods()

    assert [f.id for f in foods] == ["abc", "def"]
    assert foods[1].available is False


async def test_unauthorized_clears_session_and_fires_handler_once():
    calls = []
    store = MemorySessionStore({TOKEN_KEY: "stale", USER_KEY: "{}", "other": "x"})

    def handler(request):
        return httpx.Response(401, json={"message": "Not authorized, token failed"})

    async with client_for(handler, store, on_unauthorized=lambda: calls.append(1)) as api:
        with pytest.raises(AuthenticationError) as excinfo:
            await api.list_user_orders()

    assert calls == [1]
    assert api.unauthorized_count == 1
    assert store.snapshot() == {"other": "x"}
    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Not authorized, token failed"


@pytest.mark.parametrize(
    "status, body, expected",
    [
        (403, {"message": "Admin access required"}, AuthorizationError),
        (404, {"message": "Food item not found"}, NotFound),
        (400, {"message": "Minimum 2 items", "code": "min_items"}, ValidationError),
        (400, {"message": "Too far", "code": "out_of_range"}, OutOfRange),
        (500, {"message": "boom"}, ServerError),
        (503, None, ServerError),
    ],
)
async def test_error_mapping(status, body, expected):
    def handler(request):
        if body is None:
            return httpx.Response(status, text="<html>down</html>")
        return httpx.Response(status, json=body)

    async with client_for(handler) as api:
        with pytest.raises(expected) as excinfo:
            await api.delete_food("f1")

    assert type(excinfo.value) is expected
    assert excinfo.value.status_code == status
    if body:
        assert excinfo.value.message == body["message"]


async def test_detail_field_is_used_as_message():
    def handler(request):
        return httpx.Response(400, json={"detail": "Bad price"})

    async with client_for(handler) as api:
        with pytest.raises(ValidationError, match="Bad price"):
            await api.update_food("f1", FoodUpdate(name="Thali"))


async def test_transport_failure_becomes_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with client_for(handler) as api:
        with pytest.raises(NetworkError) as excinfo:
            await api.list_foods()
    assert excinfo.value.code == "transport_error"


async def test_timeout_becomes_network_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    async with client_for(handler) as api:
        with pytest.raises(NetworkError) as excinfo:
            await api.list_foods()
    assert excinfo.value.code == "timeout"


async def test_malformed_success_body_is_server_error():
    def handler(request):
        return httpx.Response(200, json={"unexpected": True})

    async with client_for(handler) as api:
        with pytest.raises(ServerError):
            await api.list_foods()


async def test_login_rejection_is_authentication_error():
    def handler(request):
        return httpx.Response(400, json={"message": "Invalid email or password"})

    async with client_for(handler) as api:
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            await api.login("asha@tiffinbuddy.in", "wrong")


async def test_login_returns_token_and_user():
    def handler(request):
        assert request.url.path == "/auth/login"
        return httpx.Response(200, json={
            "token": "tok",
            "user": {"_id": "u1", "email": "asha@tiffinbuddy.in", "name": "Asha", "role": "customer"},
        })

    async with client_for(handler) as api:
        response = await api.login("asha@tiffinbuddy.in", "pw")

    assert response.token == "tok"
    assert response.user.id == "u1"


async def test_update_sends_only_set_fields():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json=food_json(available=False))

    async with client_for(handler) as api:
        await api.update_food("f1", FoodUpdate(available=False))

    assert bodies == [{"available": False}]


async def test_create_order_sends_idempotency_key_and_camel_case():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(201, json={
            "_id": "o1",
            "userId": "u1",
            "items": [{"foodId": "f1", "quantity": 2, "price": 50}],
            "totalAmount": 100,
            "userLocation": {"lat": 28.6, "lng": 77.2},
            "status": "pending",
            "createdAt": "2024-05-01T12:00:00Z",
        })

    order_in = OrderCreate(
        items=[OrderItemCreate(food_id="f1", quantity=2, price=50)],
        user_location=UserLocation(lat=28.6, lng=77.2),
    )
    async with client_for(handler) as api:
        order = await api.create_order(order_in, idempotency_key="key-1")

    assert requests[0].headers[IDEMPOTENCY_HEADER] == "key-1"
    sent = json.loads(requests[0].content)
    assert sent["items"] == [{"foodId": "f1", "quantity": 2, "price": 50.0}]
    assert sent["userLocation"] == {"lat": 28.6, "lng": 77.2}
    assert order.id == "o1"
    assert order.total_amount == 100


class ThreadRecordingStore(MemorySessionStore):
    """Remembers which thread touched the store."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.threads = set()

    def get(self, key):
        self.threads.add(threading.get_ident())
        return super().get(key)

    def remove(self, key):
        self.threads.add(threading.get_ident())
        super().remove(key)


async def test_session_store_is_not_touched_on_the_event_loop_thread():
    store = ThreadRecordingStore({TOKEN_KEY: "tok"})
    handler_threads = []

    def handler(request):
        return httpx.Response(401, json={"message": "expired"})

    api = client_for(handler, store, on_unauthorized=lambda: handler_threads.append(threading.get_ident()))
    async with api:
        with pytest.raises(AuthenticationError):
            await api.list_foods()

    loop_thread = threading.get_ident()
    assert store.threads
    assert loop_thread not in store.threads
    assert handler_threads and loop_thread not in handler_threads
    assert store.get(TOKEN_KEY) is None
