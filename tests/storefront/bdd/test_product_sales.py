"""BDD tests for product sale pricing."""

import json

from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.product.product import Product
from storefront.product.sales import ApplySale, RemoveSale

scenarios("features/product_sales.feature")


def _product(catalogue, name):
    return current_domain.repository_for(Product).get(catalogue[name])


def _apply_sale(catalogue, name, percentage):
    current_domain.process(ApplySale(product_id=catalogue[name], sale_percentage=percentage), asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a {percentage:d} percent sale is applied to "{name}"'))
def sale_applied(catalogue, percentage, name):
    _apply_sale(catalogue, name, percentage)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('a {percentage:d} percent sale is applied to "{name}"'))
def apply_sale(catalogue, capture, percentage, name):
    capture(_apply_sale, catalogue, name, percentage)


@when(parsers.cfparse('the sale on "{name}" is removed'))
def remove_sale(catalogue, name):
    current_domain.process(RemoveSale(product_id=catalogue[name]), asynchronous=False)


@when(parsers.cfparse('"{shopper}" orders {quantity:d} of "{name}"'))
def place_order(catalogue, shoppers, placed, shipping_address, shopper, quantity, name):
    placed["order_id"] = current_domain.process(
        PlaceOrder(
            user_id=shoppers[shopper],
            items=json.dumps([{"product_id": catalogue[name], "quantity": quantity}]),
            shipping_address=shipping_address,
            payment_method="card",
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" is on sale at {price:g}'))
def on_sale_at(catalogue, name, price):
    product = _product(catalogue, name)
    assert product.on_sale is True
    assert product.sale_price == price


@then(parsers.cfparse('"{name}" is not on sale'))
def not_on_sale(catalogue, name):
    product = _product(catalogue, name)
    assert product.on_sale is False
    assert product.sale_price is None


@then(parsers.cfparse('"{name}" sells at {price:g}'))
def sells_at(catalogue, name, price):
    assert _product(catalogue, name).current_effective_price() == price


@then(parsers.cfparse("the order total is {total:g}"))
def order_total(placed, total):
    assert current_domain.repository_for(Order).get(placed["order_id"]).total_amount == total
