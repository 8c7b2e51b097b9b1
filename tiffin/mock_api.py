"""
Development Ordering API

In-memory FastAPI implementation of the ordering API the storefront talks
to. Lets the storefront be run and tested end to end without the real
backend.

Endpoints:
    - POST /auth/login, POST /auth/register: bearer-token auth
    - GET /food: catalog (public)
    - POST /food, PUT /food/{id}, DELETE /food/{id}: catalog admin
    - POST /orders: place an order (min items + delivery radius enforced)
    - GET /orders: every order (admin)
    - GET /orders/user: the caller's orders
    - GET /health: liveness

Run with:
    tiffin mock-api
"""

import logging
import math
import secrets
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tiffin.core.config import Settings, get_settings
from tiffin.schemas import (
    FoodCreate,
    FoodItem,
    FoodUpdate,
    LoginRequest,
    Order,
    OrderCreate,
    OrderItemCreate,
    OrderStatus,
    RegisterRequest,
    Role,
    User,
)

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0088

DEMO_ADMIN = {"name": "Kitchen Admin", "email": "admin@tiffinbuddy.in", "password": "admin123"}
DEMO_MENU = [
    {"name": "Dal Tadka Tiffin", "description": "Yellow dal, jeera rice, two rotis", "price": 120, "category": "Tiffin"},
    {"name": "Paneer Butter Masala", "description": "With butter naan", "price": 180, "category": "Curry"},
    {"name": "Veg Biryani", "description": "Dum-cooked with raita", "price": 150, "category": "Rice"},
    {"name": "Masala Chaas", "description": "Spiced buttermilk", "price": 40, "category": "Drinks"},
    {"name": "Gulab Jamun", "description": "Two pieces", "price": 60, "category": "Dessert", "available": False},
]


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle (haversine) distance between two points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def _new_id() -> str:
    return uuid.uuid4().hex[:24]


class ApiError(Exception):
    """Error rendered as ``{"message": ..., "code": ...}``."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(message)


class MockBackend:
    """All records of the development API, held in memory."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.users: dict[str, User] = {}
        self.passwords: dict[str, str] = {}
        self.tokens: dict[str, str] = {}
        self.foods: dict[str, FoodItem] = {}
        self.orders: list[Order] = []
        self.idempotent: dict[tuple[str, str], Order] = {}

    # =========================================================================
    # USERS
    # =========================================================================

    def register(self, request: RegisterRequest) -> tuple[str, User]:
        email = str(request.email).lower()
        if any(user.email == email for user in self.users.values()):
            raise ApiError(400, "User already exists", "duplicate_email")

        user = User(id=_new_id(), email=email, name=request.name, role=request.role)
        self.users[user.id] = user
        self.passwords[user.id] = request.password
        logger.info(f"Mock API: registered {email} ({user.role.value})")
        return self.issue_token(user), user

    def authenticate(self, email: str, password: str) -> tuple[str, User]:
        email = email.lower()
        for user in self.users.values():
            if user.email == email and secrets.compare_digest(self.passwords[user.id].encode(), password.encode()):
                return self.issue_token(user), user
        raise ApiError(400, "Invalid email or password", "invalid_credentials")

    def issue_token(self, user: User) -> str:
        token = secrets.token_urlsafe(24)
        self.tokens[token] = user.id
        return token

    def user_for_token(self, token: str) -> Optional[User]:
        user_id = self.tokens.get(token)
        return self.users.get(user_id) if user_id else None

    def revoke_tokens(self, user_id: Optional[str] = None) -> None:
        """Invalidate sessions (all of them, or one user's)."""
        for token, owner in list(self.tokens.items()):
            if user_id is None or owner == user_id:
                del self.tokens[token]

    # =========================================================================
    # CATALOG
    # =========================================================================

    def create_food(self, data: FoodCreate) -> FoodItem:
        food = FoodItem(id=_new_id(), **data.model_dump())
        self.foods[food.id] = food
        return food

    def update_food(self, food_id: str, changes: FoodUpdate) -> FoodItem:
        food = self.foods.get(food_id)
        if food is None:
            raise ApiError(404, "Food item not found", "not_found")
        updated = food.model_copy(update=changes.model_dump(exclude_unset=True))
        self.foods[food_id] = updated
        return updated

    def delete_food(self, food_id: str) -> None:
        if self.foods.pop(food_id, None) is None:
            raise ApiError(404, "Food item not found", "not_found")

    # =========================================================================
    # ORDERS
    # =========================================================================

    def create_order(self, user: User, data: OrderCreate, idempotency_key: Optional[str]) -> tuple[Order, bool]:
        """Returns (order, created); a replayed key returns the earlier order."""
        if idempotency_key and (user.id, idempotency_key) in self.idempotent:
            logger.info(f"Mock API: replayed order for key {idempotency_key}")
            return self.idempotent[(user.id, idempotency_key)], False

        if data.total_items < self.settings.min_order_items:
            raise ApiError(
                400,
                f"Minimum {self.settings.min_order_items} items required per order",
                "min_items",
            )

        lines = []
        for item in data.items:
            food = self.foods.get(item.food_id)
            if food is None or not food.available:
                raise ApiError(400, f"Food item {item.food_id} is not available", "unavailable_item")
            lines.append(OrderItemCreate(food_id=food.id, quantity=item.quantity, price=food.price))

        distance = distance_km(
            self.settings.restaurant_latitude,
            self.settings.restaurant_longitude,
            data.user_location.lat,
            data.user_location.lng,
        )
        if distance > self.settings.delivery_radius_km:
            raise ApiError(
                400,
                f"Delivery is only available within {self.settings.delivery_radius_km:g}km "
                f"(you are {distance:.1f}km away)",
                "out_of_range",
            )

        order = Order(
            id=_new_id(),
            user_id=user.id,
            items=lines,
            total_amount=round(sum(line.quantity * line.price for line in lines), 2),
            user_location=data.user_location,
            status=OrderStatus.PENDING,
            created_at=datetime.now(timezone.utc),
        )
        self.orders.append(order)
        if idempotency_key:
            self.idempotent[(user.id, idempotency_key)] = order
        logger.info(f"Mock API: order {order.id} created ({distance:.1f}km, total {order.total_amount})")
        return order, True

    def seed(self) -> None:
        """Demo admin account and a small menu."""
        self.register(RegisterRequest(role=Role.ADMIN, **DEMO_ADMIN))
        for entry in DEMO_MENU:
            self.create_food(FoodCreate(**entry))


def _out(model: Any) -> dict[str, Any]:
    """Serialize a record the way the real API does (``_id`` key)."""
    data = model.to_wire()
    data["_id"] = data.pop("id")
    return data


def create_app(settings: Optional[Settings] = None, seed: bool = True) -> FastAPI:
    """
    Build a development API instance with its own in-memory backend.

    Args:
        settings: Business rules (min items, radius, origin); defaults to get_settings()
        seed: Create the demo admin and menu
    """
    settings = settings or get_settings()
    backend = MockBackend(settings)
    if seed:
        backend.seed()

    app = FastAPI(
        title=f"{settings.app_name} Development API",
        version=settings.app_version,
        docs_url="/docs",
    )
    app.state.backend = backend

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
        return JSONResponse(
            status_code=400,
            content={"message": f"{field}: {first.get('msg', 'invalid value')}", "code": "validation_error"},
        )

    # =========================================================================
    # DEPENDENCIES
    # =========================================================================

    def current_user(authorization: Optional[str] = Header(None)) -> User:
        scheme, _, token = (authorization or "").partition(" ")
        user = backend.user_for_token(token) if scheme.lower() == "bearer" else None
        if user is None:
            raise ApiError(401, "Not authorized, token failed", "unauthorized")
        return user

    def admin_user(user: User = Depends(current_user)) -> User:
        if not user.is_admin:
            raise ApiError(403, "Admin access required", "forbidden")
        return user

    # =========================================================================
    # ROUTES
    # =========================================================================

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, Any]:
        return {
            "status": "operational",
            "foods": len(backend.foods),
            "orders": len(backend.orders),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.post("/auth/login", tags=["Auth"])
    async def login(body: LoginRequest) -> dict[str, Any]:
        token, user = backend.authenticate(str(body.email), body.password)
        return {"token": token, "user": user.to_wire()}

    @app.post("/auth/register", status_code=201, tags=["Auth"])
    async def register(body: RegisterRequest) -> dict[str, Any]:
        token, user = backend.register(body)
        return {"token": token, "user": user.to_wire()}

    @app.get("/food", tags=["Food"])
    async def list_foods() -> list[dict[str, Any]]:
        return [_out(food) for food in backend.foods.values()]

    @app.post("/food", status_code=201, tags=["Food"])
    async def create_food(body: FoodCreate, user: User = Depends(admin_user)) -> dict[str, Any]:
        return _out(backend.create_food(body))

    @app.put("/food/{food_id}", tags=["Food"])
    async def update_food(food_id: str, body: FoodUpdate, user: User = Depends(admin_user)) -> dict[str, Any]:
        return _out(backend.update_food(food_id, body))

    @app.delete("/food/{food_id}", status_code=204, tags=["Food"])
    async def delete_food(food_id: str, user: User = Depends(admin_user)) -> Response:
        backend.delete_food(food_id)
        return Response(status_code=204)

    @app.post("/orders", tags=["Orders"])
    async def create_order(
        body: OrderCreate,
        response: Response,
        user: User = Depends(current_user),
        idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    ) -> dict[str, Any]:
        order, created = backend.create_order(user, body, idempotency_key)
        response.status_code = 201 if created else 200
        return _out(order)

    @app.get("/orders", tags=["Orders"])
    async def list_orders(user: User = Depends(admin_user)) -> list[dict[str, Any]]:
        return [_out(order) for order in reversed(backend.orders)]

    @app.get("/orders/user", tags=["Orders"])
    async def list_user_orders(user: User = Depends(current_user)) -> list[dict[str, Any]]:
        return [_out(order) for order in reversed(backend.orders) if order.user_id == user.id]

    return app
