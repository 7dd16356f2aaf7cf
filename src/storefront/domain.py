"""Storefront bounded context — Catalogue, Orders, and Identity.

Handles the product catalogue (pricing, sales, stock), the order lifecycle with
stock reservation, and user accounts that own orders. A single bounded context
because order placement reads and decrements product stock in the same unit of
work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
