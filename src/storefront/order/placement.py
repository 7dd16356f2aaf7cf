"""Order placement — validate every line against the catalogue, then reserve stock
and persist the order in a single unit of work.

Nothing is decremented until every line has passed validation, so a request that
fails on its last line leaves all stock levels exactly as they were.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import InsufficientStock, InvalidRequest, NotFound
from storefront.order.order import Order
from storefront.product.product import Product, StockReason


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, max_length=50)


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


def _requested_lines(raw_items):
    """Normalize requested lines to ``(product_id, quantity)`` pairs."""
    if not raw_items or not isinstance(raw_items, list):
        raise InvalidRequest("No order items")

    lines = []
    for raw in raw_items:
        product_id = raw.get("product_id") if isinstance(raw, dict) else None
        if not product_id:
            raise InvalidRequest("Each order item needs a product_id")
        try:
            quantity = int(raw.get("quantity"))
        except (TypeError, ValueError):
            raise InvalidRequest(f"Invalid quantity for product {product_id}") from None
        if quantity < 1:
            raise InvalidRequest(f"Quantity must be at least 1 for product {product_id}")
        lines.append((str(product_id), quantity))
    return lines


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = _requested_lines(_loads(command.items))
        shipping_address = _loads(command.shipping_address)
        if not shipping_address:
            raise InvalidRequest("Shipping address is required")

        demand = {}
        for product_id, quantity in lines:
            demand[product_id] = demand.get(product_id, 0) + quantity

        # Phase one: validate every line before touching any stock
        product_repo = current_domain.repository_for(Product)
        products = {}
        for product_id, _ in lines:
            if product_id in products:
                continue
            product = product_repo.find_by_id(product_id)
            if product is None:
                raise NotFound(f"Product not found: {product_id}")
            if not product.has_stock_for(demand[product_id]):
                raise InsufficientStock(product_id, product.name, product.stock, requested=demand[product_id])
            products[product_id] = product

        priced_lines = [
            {
                "product_id": product_id,
                "product_name": products[product_id].name,
                "quantity": quantity,
                "unit_price": products[product_id].current_effective_price(),
            }
            for product_id, quantity in lines
        ]
        order = Order.place(
            user_id=command.user_id,
            lines=priced_lines,
            shipping_address=shipping_address,
            payment_method=command.payment_method,
        )

        # Phase two: commit. The decrement is conditional and cannot go negative.
        for product_id, quantity in demand.items():
            product = products[product_id]
            product.adjust_stock(-quantity, reason=StockReason.ORDER_PLACED.value)
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            line_count=len(priced_lines),
            total_amount=order.total_amount,
        )
        return str(order.id)
