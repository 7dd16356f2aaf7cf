"""Read side for orders — owner and administrator listings with product and
owner details resolved from the catalogue and the user store.

Products deleted after an order was placed resolve to ``None``; the line item
still carries the captured name and unit price.
"""

import math

from protean.utils.globals import current_domain

from storefront.auth.principal import Principal, ensure_admin, ensure_can_access
from storefront.order.cancellation import load_order
from storefront.order.order import Order
from storefront.product.product import Product
from storefront.user.user import User


def _iso(value):
    return value.isoformat() if value else None


class _ProductSummaries:
    """Per-request cache of product summaries keyed by product id."""

    def __init__(self):
        self._repo = current_domain.repository_for(Product)
        self._cache = {}

    def get(self, product_id):
        key = str(product_id)
        if key not in self._cache:
            product = self._repo.find_by_id(key)
            self._cache[key] = (
                {
                    "id": str(product.id),
                    "name": product.name,
                    "price": product.price,
                    "image_url": product.image_url,
                }
                if product
                else None
            )
        return self._cache[key]


def serialize_order(order: Order, products: _ProductSummaries | None = None, owner: User | None = None) -> dict:
    products = products or _ProductSummaries()
    address = order.shipping_address
    data = {
        "id": str(order.id),
        "user_id": str(order.user_id),
        "items": [
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "product_name": item.product_name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "product": products.get(item.product_id),
            }
            for item in order.items
        ],
        "shipping_address": {
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "postal_code": address.postal_code,
            "country": address.country,
        }
        if address
        else None,
        "payment_method": order.payment_method,
        "total_amount": order.total_amount,
        "status": order.status,
        "payment_status": order.payment_status,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
        "paid_at": _iso(order.paid_at),
        "delivered_at": _iso(order.delivered_at),
        "cancelled_at": _iso(order.cancelled_at),
    }
    if owner is not None:
        data["user"] = {"id": str(owner.id), "name": owner.name, "email": owner.email}
    return data


def get_order(order_id, principal: Principal) -> dict:
    order = load_order(order_id)
    ensure_can_access(principal, order.user_id, "Not authorized to view this order")
    owner = current_domain.repository_for(User).find_by_id(order.user_id)
    return serialize_order(order, owner=owner)


def list_user_orders(principal: Principal) -> list[dict]:
    products = _ProductSummaries()
    orders = current_domain.repository_for(Order).for_user(principal.user_id)
    return [serialize_order(order, products) for order in orders]


def list_all_orders(principal: Principal, page=1, limit=10) -> dict:
    ensure_admin(principal)
    page = max(int(page or 1), 1)
    limit = max(int(limit or 10), 1)

    orders, total = current_domain.repository_for(Order).page(page=page, limit=limit)

    products = _ProductSummaries()
    user_repo = current_domain.repository_for(User)
    owners = {}
    serialized = []
    for order in orders:
        owner_id = str(order.user_id)
        if owner_id not in owners:
            owners[owner_id] = user_repo.find_by_id(owner_id)
        serialized.append(serialize_order(order, products, owners[owner_id]))

    return {
        "orders": serialized,
        "page": page,
        "pages": math.ceil(total / limit),
        "total": total,
    }
