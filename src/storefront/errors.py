"""Storefront error taxonomy.

Each error carries a human readable message that is returned to the client
verbatim. The HTTP layer maps error classes to status codes in ``api/errors.py``.
"""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"message": self.message, "error_type": type(self).__name__}


class InvalidRequest(StorefrontError):
    """Raised when input is malformed or empty."""


class NotFound(StorefrontError):
    """Raised when a product, order or user does not exist."""


class Unauthorized(StorefrontError):
    """Raised when credentials or a bearer token are missing or invalid."""


class Forbidden(StorefrontError):
    """Raised when an authenticated principal may not perform an operation."""


class Conflict(StorefrontError):
    """Raised when a resource already exists."""


class InvalidTransition(StorefrontError):
    """Raised when an order cannot move from its current status."""

    def __init__(self, current_status: str, message: str | None = None):
        self.current_status = current_status
        super().__init__(message or f"Cannot cancel order with status: {current_status}")


class InsufficientStock(StorefrontError):
    """Raised when a requested quantity exceeds the units in stock."""

    def __init__(self, product_id: str, product_name: str, available: int, requested: int | None = None):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(f"Not enough stock for {product_name}. Available: {available}")

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "product_id": self.product_id,
            "product_name": self.product_name,
            "available": self.available,
        }
