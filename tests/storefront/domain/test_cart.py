"""Tests for the shopping cart and its stores."""

import pytest

from storefront.cart.cart import Cart
from storefront.cart.store import InMemoryCartStore, JsonFileCartStore
from storefront.errors import InvalidRequest


@pytest.fixture()
def store():
    return InMemoryCartStore()


@pytest.fixture()
def cart(store):
    return Cart(store)


class TestAddToCart:
    def test_add_new_line(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=2, stock=5)
        assert cart.total_items == 2
        assert cart.total_amount == 20.0

    def test_add_merges_existing_line(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=2, stock=5)
        cart.add("p1", "Lamp", 10.0, quantity=1, stock=5)
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3

    def test_merge_is_clamped_to_stock(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=4, stock=5)
        cart.add("p1", "Lamp", 10.0, quantity=4, stock=5)
        assert cart.lines[0].quantity == 5

    def test_new_line_is_clamped_to_stock(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=9, stock=3)
        assert cart.lines[0].quantity == 3

    def test_out_of_stock_rejected(self, cart):
        with pytest.raises(InvalidRequest):
            cart.add("p1", "Lamp", 10.0, quantity=1, stock=0)
        assert cart.is_empty()

    def test_non_positive_quantity_rejected(self, cart):
        with pytest.raises(InvalidRequest):
            cart.add("p1", "Lamp", 10.0, quantity=0, stock=5)


class TestUpdateCart:
    def test_update_quantity_clamps_to_stock(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=1, stock=4)
        cart.update_quantity("p1", 10)
        assert cart.lines[0].quantity == 4

    def test_update_quantity_has_floor_of_one(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=2, stock=4)
        cart.update_quantity("p1", 0)
        assert cart.lines[0].quantity == 1

    def test_update_quantity_requires_a_value(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=2, stock=4)
        with pytest.raises(InvalidRequest, match="Quantity is required"):
            cart.update_quantity("p1", None)
        assert cart.lines[0].quantity == 2

    def test_remove_and_clear(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=1, stock=4)
        cart.add("p2", "Bulb", 2.5, quantity=2, stock=4)
        cart.remove("p1")
        assert [line.product_id for line in cart.lines] == ["p2"]
        cart.clear()
        assert cart.is_empty()
        assert cart.total_amount == 0.0

    def test_total_amount_rounds_to_cents(self, cart):
        cart.add("p1", "Gum", 0.1, quantity=3, stock=10)
        assert cart.total_amount == 0.3


class TestCheckoutItems:
    def test_checkout_items(self, cart):
        cart.add("p1", "Lamp", 10.0, quantity=2, stock=5)
        assert cart.checkout_items() == [{"product_id": "p1", "quantity": 2}]

    def test_empty_cart_rejected(self, cart):
        with pytest.raises(InvalidRequest, match="No order items"):
            cart.checkout_items()


class TestPersistence:
    def test_every_mutation_is_saved(self, cart, store):
        cart.add("p1", "Lamp", 10.0, quantity=2, stock=5)
        assert store.load("default")["total_items"] == 2
        cart.update_quantity("p1", 3)
        assert store.load("default")["items"][0]["quantity"] == 3
        cart.clear()
        assert store.load("default")["items"] == []

    def test_reload_from_memory_store(self, cart, store):
        cart.add("p1", "Lamp", 10.0, quantity=2, stock=5)
        reloaded = Cart.load(store)
        assert reloaded.total_items == 2
        assert reloaded.lines[0].name == "Lamp"

    def test_json_file_store(self, tmp_path):
        store = JsonFileCartStore(tmp_path / "carts")
        cart = Cart(store, cart_id="user-1")
        cart.add("p1", "Lamp", 10.0, quantity=2, stock=5, image_url="https://example.com/lamp.jpg")

        assert (tmp_path / "carts" / "user-1.json").exists()
        reloaded = Cart.load(store, cart_id="user-1")
        assert reloaded.lines[0].image_url == "https://example.com/lamp.jpg"
        assert reloaded.total_amount == 20.0

    def test_load_missing_cart_is_empty(self, tmp_path):
        assert Cart.load(JsonFileCartStore(tmp_path), cart_id="nobody").is_empty()

    def test_json_file_store_rejects_ids_outside_its_directory(self, tmp_path):
        store = JsonFileCartStore(tmp_path / "carts")
        with pytest.raises(InvalidRequest, match="Invalid cart id"):
            store.save("../escaped", {"lines": []})
        with pytest.raises(InvalidRequest):
            store.load("nested/cart")
        assert not (tmp_path / "escaped.json").exists()
