"""Order cancellation — command and handler.

Cancelling returns every line's quantity to its product. Products deleted since
the order was placed are skipped.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.auth.principal import Principal, Role, ensure_can_access
from storefront.domain import logger, storefront
from storefront.errors import NotFound
from storefront.order.order import Order
from storefront.product.product import Product, StockReason


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(max_length=20, default=Role.USER.value)


def load_order(order_id) -> Order:
    order = current_domain.repository_for(Order).find_by_id(order_id)
    if order is None:
        raise NotFound("Order not found")
    return order


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_order(command.order_id)
        principal = Principal(user_id=str(command.requested_by), role=command.requester_role)
        ensure_can_access(principal, order.user_id, "Not authorized to cancel this order")

        order.cancel(cancelled_by=command.requested_by)

        returned = {}
        for item in order.items:
            returned[str(item.product_id)] = returned.get(str(item.product_id), 0) + item.quantity

        product_repo = current_domain.repository_for(Product)
        skipped = []
        for product_id, quantity in returned.items():
            product = product_repo.find_by_id(product_id)
            if product is None:
                skipped.append(product_id)
                continue
            product.adjust_stock(quantity, reason=StockReason.ORDER_CANCELLED.value)
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_cancelled",
            order_id=str(order.id),
            cancelled_by=str(command.requested_by),
            skipped_products=skipped,
        )
