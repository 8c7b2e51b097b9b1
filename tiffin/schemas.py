"""
Pydantic Schemas for the Ordering API

Wire models shared by the API client, the views and the development
API. The remote service speaks camelCase JSON and keys its records by
``_id``; these models accept either spelling and always serialize with
the camelCase aliases.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model reading and writing camelCase field names."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        """JSON-ready payload using the API's field names."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """Accept the legacy ``user`` spelling for customers."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.lower() == "user":
            return cls.CUSTOMER
        return cls(str(value).lower())


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# =============================================================================
# USERS & AUTH
# =============================================================================

class User(CamelModel):
    """Signed-in user as returned by the auth endpoints."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"))
    email: str
    name: str
    role: Role = Role.CUSTOMER

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v: Any) -> Role:
        return Role.parse(v)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Role = Role.CUSTOMER

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v: Any) -> Role:
        return Role.parse(v)


class AuthResponse(CamelModel):
    """Token plus user record handed back by login and register."""
    token: str = Field(..., min_length=1)
    user: User


# =============================================================================
# CATALOG
# =============================================================================

class FoodItem(CamelModel):
    """A catalog entry. Read-only snapshot on the client."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"))
    name: str
    description: str = ""
    price: float = Field(..., ge=0)
    image: Optional[str] = None
    category: str = ""
    available: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return str(v)


class FoodCreate(CamelModel):
    """Payload for ``POST /food``."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    category: str = Field(..., min_length=1, max_length=50)
    image: Optional[str] = None
    available: bool = True


class FoodUpdate(CamelModel):
    """Partial payload for ``PUT /food/{id}``; unset fields are not sent."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    image: Optional[str] = None
    available: Optional[bool] = None


# =============================================================================
# ORDERS
# =============================================================================

class UserLocation(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class OrderItemCreate(CamelModel):
    """Single order line: food id, quantity and unit price at order time."""
    food_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)

    @property
    def total_price(self) -> float:
        return round(self.quantity * self.price, 2)


class OrderCreate(CamelModel):
    """Payload for ``POST /orders``."""
    items: List[OrderItemCreate] = Field(..., min_length=1)
    user_location: UserLocation

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_amount(self) -> float:
        return round(sum(item.quantity * item.price for item in self.items), 2)


class Order(CamelModel):
    """An order as stored by the API."""
    id: str = Field(..., validation_alias=AliasChoices("id", "_id"))
    user_id: str
    items: List[OrderItemCreate]
    total_amount: float
    user_location: UserLocation
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> str:
        return str(v)

    @property
    def short_id(self) -> str:
        return self.id[-6:]


class ApiErrorBody(BaseModel):
    """Error body returned by the API on 4xx/5xx responses."""
    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None
    detail: Optional[Any] = None
    code: Optional[str] = None

    @property
    def text(self) -> Optional[str]:
        if self.message:
            return self.message
        if isinstance(self.detail, str):
            return self.detail
        return None
