"""Storefront HTTP API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import auth_router, order_router, product_router, user_router

__all__ = ["auth_router", "user_router", "product_router", "order_router", "register_error_handlers"]
