"""Shared BDD fixtures and step definitions for the Storefront domain."""

import json

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then

from storefront.errors import StorefrontError
from storefront.order.order import Order
from storefront.product.management import CreateProduct
from storefront.product.product import Product
from storefront.user.registration import RegisterUser


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalogue():
    """Product ids by name."""
    return {}


@pytest.fixture()
def shoppers():
    """User ids by name."""
    return {}


@pytest.fixture()
def error():
    """Container for captured storefront errors."""
    return {"exc": None}


@pytest.fixture()
def placed():
    """Holds the id of the last order placed in a scenario."""
    return {"order_id": None}


@pytest.fixture()
def shipping_address():
    """JSON shipping address used by every scenario order."""
    return json.dumps(
        {
            "street": "123 Main St",
            "city": "Springfield",
            "state": "IL",
            "postal_code": "62701",
            "country": "US",
        }
    )


@pytest.fixture()
def capture(error):
    """Run a callable, storing any StorefrontError in ``error``."""

    def _run(fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except StorefrontError as exc:
            error["exc"] = exc
            return None

    return _run


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:g} with {stock:d} in stock'))
def product_in_catalogue(catalogue, name, price, stock):
    catalogue[name] = current_domain.process(
        CreateProduct(
            name=name,
            description=f"{name} description",
            price=price,
            category="General",
            stock=stock,
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('a registered shopper "{name}"'))
def registered_shopper(shoppers, name):
    shoppers[name] = current_domain.process(
        RegisterUser(name=name, email=f"{name.lower()}@example.com", password="secret123"),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_has_stock(catalogue, name, stock):
    assert current_domain.repository_for(Product).get(catalogue[name]).stock == stock


@then(parsers.cfparse('the order status is "{status}"'))
def order_has_status(placed, status):
    assert current_domain.repository_for(Order).get(placed["order_id"]).status == status


@then(parsers.cfparse('the request is rejected with "{message}"'))
def request_rejected(error, message):
    assert error["exc"] is not None
    assert error["exc"].message == message


@then("the request succeeds")
def request_succeeds(error):
    assert error["exc"] is None
