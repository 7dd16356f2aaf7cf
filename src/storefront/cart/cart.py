"""Shopping cart — the lines a shopper intends to buy, fed into order placement.

Quantities are clamped to the stock seen when the product was added; the order
service re-checks stock authoritatively at checkout. Every mutation is saved
through the injected ``CartStore``.
"""

from dataclasses import asdict, dataclass

from storefront.cart.store import CartStore
from storefront.errors import InvalidRequest
from storefront.utils.money import line_total, round_money


@dataclass
class CartLine:
    product_id: str
    name: str
    price: float
    quantity: int
    stock: int
    image_url: str | None = None


class Cart:
    def __init__(self, store: CartStore, cart_id: str = "default", lines: list[CartLine] | None = None):
        self.store = store
        self.cart_id = cart_id
        self.lines: list[CartLine] = lines or []

    @classmethod
    def load(cls, store: CartStore, cart_id: str = "default") -> "Cart":
        document = store.load(cart_id) or {}
        lines = [CartLine(**line) for line in document.get("items", [])]
        return cls(store, cart_id, lines)

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_amount(self) -> float:
        return round_money(sum(line_total(line.price, line.quantity) for line in self.lines))

    def is_empty(self) -> bool:
        return not self.lines

    def line_for(self, product_id) -> CartLine | None:
        return next((line for line in self.lines if line.product_id == str(product_id)), None)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(self, product_id, name, price, quantity=1, stock=0, image_url=None) -> CartLine:
        """Add units of a product, merging with an existing line."""
        if quantity is None or quantity < 1:
            raise InvalidRequest("Quantity must be at least 1")
        if stock is None or stock < 1:
            raise InvalidRequest(f"{name} is out of stock")

        line = self.line_for(product_id)
        if line is None:
            line = CartLine(
                product_id=str(product_id),
                name=name,
                price=price,
                quantity=min(quantity, stock),
                stock=stock,
                image_url=image_url,
            )
            self.lines.append(line)
        else:
            line.stock = stock
            line.price = price
            line.quantity = min(line.quantity + quantity, stock)

        self._save()
        return line

    def update_quantity(self, product_id, quantity) -> None:
        """Set a line's quantity, clamped to ``[1, stock]``. Unknown products are ignored."""
        if quantity is None:
            raise InvalidRequest("Quantity is required")
        line = self.line_for(product_id)
        if line is not None:
            line.quantity = max(min(quantity, line.stock), 1)
        self._save()

    def remove(self, product_id) -> None:
        self.lines = [line for line in self.lines if line.product_id != str(product_id)]
        self._save()

    def clear(self) -> None:
        self.lines = []
        self._save()

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def checkout_items(self) -> list[dict]:
        """The requested lines in the shape order placement expects."""
        if self.is_empty():
            raise InvalidRequest("No order items")
        return [{"product_id": line.product_id, "quantity": line.quantity} for line in self.lines]

    def to_dict(self) -> dict:
        return {
            "items": [asdict(line) for line in self.lines],
            "total_items": self.total_items,
            "total_amount": self.total_amount,
        }

    def _save(self) -> None:
        self.store.save(self.cart_id, self.to_dict())
