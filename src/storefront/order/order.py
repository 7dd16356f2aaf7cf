"""Order aggregate — a user's purchase of one or more catalogue products.

Status model:
    pending → processing → shipped → delivered
    pending/processing → cancelled (cancellation restores stock)

Administrators may set any status directly (``update_status``); the table of
expected transitions is kept in ``STATUS_TRANSITIONS`` and is only enforced when
strict transitions are requested.

Line items capture the product name and the effective unit price at the moment
of purchase. Neither is ever recalculated.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.errors import InvalidRequest, InvalidTransition
from storefront.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusChanged,
)
from storefront.utils.money import line_total, round_money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


# Accepted on input, stored as the canonical value
PAYMENT_STATUS_ALIASES = {"paid": PaymentStatus.COMPLETED.value}

# Expected lifecycle. Administrators bypass it unless strict mode is on.
STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

CANCELLABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.PROCESSING}


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        raise InvalidRequest(f"Invalid order status: {value}") from None


def parse_payment_status(value) -> PaymentStatus:
    normalized = str(value).strip().lower()
    normalized = PAYMENT_STATUS_ALIASES.get(normalized, normalized)
    try:
        return PaymentStatus(normalized)
    except ValueError:
        raise InvalidRequest(f"Invalid payment status: {value}") from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships. Copied onto the order, so later edits to the
    user's address book do not affect it."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class LineItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def subtotal(self):
        return round_money(line_total(self.unit_price, self.quantity))


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(LineItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(required=True, max_length=50)
    total_amount = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()
    paid_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines, shipping_address, payment_method):
        """Create a pending order from priced lines.

        Args:
            user_id: The owner of the order.
            lines: List of dicts with product_id, product_name, quantity and
                unit_price. Prices are the effective prices at purchase time.
            shipping_address: Dict with street, city, state, postal_code, country.
            payment_method: Free-form label, recorded but never processed.
        """
        if not lines:
            raise InvalidRequest("No order items")

        total = round_money(sum(line_total(line["unit_price"], line["quantity"]) for line in lines))
        now = datetime.now(UTC)

        order = cls(
            user_id=str(user_id),
            items=[
                LineItem(
                    product_id=str(line["product_id"]),
                    product_name=line["product_name"],
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                )
                for line in lines
            ],
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method,
            total_amount=total,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                items=json.dumps(
                    [
                        {
                            "product_id": item.product_id,
                            "product_name": item.product_name,
                            "quantity": item.quantity,
                            "unit_price": item.unit_price,
                        }
                        for item in order.items
                    ]
                ),
                item_count=sum(item.quantity for item in order.items),
                total_amount=total,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def is_cancellable(self) -> bool:
        return OrderStatus(self.status) in CANCELLABLE_STATUSES

    # -------------------------------------------------------------------
    # State changes
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by):
        """Cancel a pending or processing order.

        Stock restoration is the caller's job. The order only records the fact.
        """
        if not self.is_cancellable():
            raise InvalidTransition(self.status)

        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                user_id=str(self.user_id),
                previous_status=previous,
                cancelled_by=str(cancelled_by),
                cancelled_at=now,
            )
        )

    def update_status(self, status, strict=False):
        target = parse_status(status)
        current = OrderStatus(self.status)

        if strict and target != current and target not in STATUS_TRANSITIONS[current]:
            raise InvalidTransition(
                current.value,
                f"Cannot change order status from {current.value} to {target.value}",
            )

        now = datetime.now(UTC)
        self.status = target.value
        if target == OrderStatus.DELIVERED:
            self.delivered_at = now
        elif target == OrderStatus.CANCELLED:
            self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def update_payment_status(self, payment_status):
        target = parse_payment_status(payment_status)
        previous = self.payment_status

        now = datetime.now(UTC)
        self.payment_status = target.value
        if target == PaymentStatus.COMPLETED:
            self.paid_at = now
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_payment_status=previous,
                new_payment_status=target.value,
                changed_at=now,
            )
        )
