"""
Storefront Error Taxonomy

Every failure a view can report is one of these exceptions. Each carries
a short title and a user-facing message so views can turn it straight
into a notification, plus the HTTP status and structured error code when
the failure came back from the API.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from typing import Optional


class StorefrontError(Exception):
    """Base class for all storefront failures."""

    default_title = "Something went wrong"
    default_message = "Please try again later"

    def __init__(
        self,
        message: Optional[str] = None,
        title: Optional[str] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.title = title or self.default_title
        self.status_code = status_code
        self.code = code
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code!r}, code={self.code!r})"
        )


class NetworkError(StorefrontError):
    """The API could not be reached (DNS, connect, read timeout...)."""
    default_title = "Network error"
    default_message = "Could not reach the server. Check your connection."


class AuthenticationError(StorefrontError):
    """Credentials were rejected or the session is no longer valid."""
    default_title = "Login failed"
    default_message = "Invalid credentials"


InvalidCredentials = AuthenticationError


class AuthorizationError(StorefrontError):
    """The signed-in user lacks the role required for the call."""
    default_title = "Not allowed"
    default_message = "You do not have permission to do that"


class ValidationError(StorefrontError):
    """Malformed or out-of-policy input."""
    default_title = "Invalid request"
    default_message = "Please check your input and try again"


class NotFound(ValidationError):
    """The referenced record does not exist (anymore)."""
    default_title = "Not found"
    default_message = "The requested item no longer exists"


class OutOfRange(ValidationError):
    """Delivery coordinates are outside the service radius."""
    default_title = "Delivery unavailable"
    default_message = "Sorry, we don't deliver to your location."


class LocationUnavailable(StorefrontError):
    """Location lookup was denied, unsupported or timed out."""
    default_title = "Location required"
    default_message = "Please enable location access to place orders"


class ServerError(StorefrontError):
    """The API failed with an unexpected 5xx response."""
    default_title = "Server error"
    default_message = "The server had a problem. Please try again later"


__all__ = [
    "StorefrontError",
    "NetworkError",
    "AuthenticationError",
    "InvalidCredentials",
    "AuthorizationError",
    "ValidationError",
    "NotFound",
    "OutOfRange",
    "LocationUnavailable",
    "ServerError",
]
