"""Checkout — turn a cart into an order for the authenticated principal."""

import json

from protean.utils.globals import current_domain

from storefront.auth.principal import Principal
from storefront.cart.cart import Cart
from storefront.order.placement import PlaceOrder


def checkout(cart: Cart, principal: Principal, shipping_address: dict, payment_method: str) -> str:
    """Place an order for the cart's lines and empty the cart once it succeeds.

    A failed placement (missing product, insufficient stock) leaves the cart as
    it was so the shopper can adjust it.
    """
    order_id = current_domain.process(
        PlaceOrder(
            user_id=principal.user_id,
            items=json.dumps(cart.checkout_items()),
            shipping_address=json.dumps(shipping_address),
            payment_method=payment_method,
        ),
        asynchronous=False,
    )
    cart.clear()
    return order_id
