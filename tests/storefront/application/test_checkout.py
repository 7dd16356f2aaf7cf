"""Tests for checking out a cart into an order."""

import pytest
from protean.utils.globals import current_domain

from storefront.auth.principal import Principal
from storefront.cart.cart import Cart
from storefront.cart.checkout import checkout
from storefront.cart.store import InMemoryCartStore
from storefront.errors import InsufficientStock, InvalidRequest
from storefront.order.order import Order
from storefront.product.management import CreateProduct
from storefront.product.product import Product
from storefront.product.stock import SetStock

ADDRESS = {"street": "1 Main St", "city": "Springfield", "postal_code": "62701", "country": "US"}


def _create_product(name="Lamp", price=10.0, stock=5):
    return current_domain.process(
        CreateProduct(name=name, description="desc", price=price, category="Home", stock=stock),
        asynchronous=False,
    )


@pytest.fixture()
def cart():
    return Cart(InMemoryCartStore(), cart_id="user-1")


class TestCheckout:
    def test_places_order_and_clears_cart(self, cart):
        lamp = _create_product(stock=5)
        cart.add(lamp, "Lamp", 10.0, quantity=3, stock=5)

        order_id = checkout(cart, Principal(user_id="user-1"), ADDRESS, "card")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_amount == 30.0
        assert current_domain.repository_for(Product).get(lamp).stock == 2
        assert cart.is_empty()
        assert cart.store.load("user-1")["items"] == []

    def test_failed_checkout_keeps_cart(self, cart):
        lamp = _create_product(stock=5)
        cart.add(lamp, "Lamp", 10.0, quantity=3, stock=5)
        current_domain.process(SetStock(product_id=lamp, quantity=1), asynchronous=False)

        with pytest.raises(InsufficientStock):
            checkout(cart, Principal(user_id="user-1"), ADDRESS, "card")

        assert cart.total_items == 3

    def test_empty_cart(self, cart):
        with pytest.raises(InvalidRequest):
            checkout(cart, Principal(user_id="user-1"), ADDRESS, "card")
