"""Administrator order updates — order status and payment status."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.config import get_settings
from storefront.domain import logger, storefront
from storefront.order.cancellation import load_order
from storefront.order.order import Order


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        order = load_order(command.order_id)
        previous = order.status
        order.update_status(command.status, strict=get_settings().strict_status_transitions)
        current_domain.repository_for(Order).add(order)
        logger.info("order_status_updated", order_id=str(order.id), previous=previous, status=order.status)

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        order = load_order(command.order_id)
        order.update_payment_status(command.payment_status)
        current_domain.repository_for(Order).add(order)
        logger.info("payment_status_updated", order_id=str(order.id), payment_status=order.payment_status)
