"""Product aggregate root — a catalogue entry with pricing, sale metadata and stock.

Stock is mutated by administrators (stock management) and by the order service:
decremented when an order is placed, restored when it is cancelled. Stock can
never go below zero; a decrement that would do so fails with InsufficientStock
and leaves the product untouched.

Sale pricing:
    on_sale      True while a non-zero sale percentage is applied
    sale_price   price × (1 − sale_percentage/100), rounded to cents
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.domain import storefront
from storefront.errors import InsufficientStock, InvalidRequest
from storefront.utils.money import discounted_price, round_money

DEFAULT_IMAGE_URL = "https://via.placeholder.com/150"

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class StockReason(Enum):
    """Why a product's stock level changed."""

    MANUAL = "Manual_Adjustment"
    ORDER_PLACED = "Order_Placed"
    ORDER_CANCELLED = "Order_Cancelled"


@storefront.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    description: Text(required=True)
    price: Float(required=True, min_value=0.0)
    sale_price: Float(min_value=0.0)
    on_sale: Boolean(default=False)
    sale_percentage: Float(default=0.0, min_value=0.0, max_value=100.0)
    category: String(required=True, max_length=100)
    image_url: String(max_length=500, default=DEFAULT_IMAGE_URL)
    stock: Integer(default=0, min_value=0)
    is_available: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def sale_price_must_match_sale_percentage(self):
        if not self.on_sale:
            if self.sale_price is not None:
                raise ValidationError({"sale_price": ["A product that is not on sale cannot carry a sale price"]})
            return

        expected = discounted_price(self.price, self.sale_percentage)
        if self.sale_price is None or round_money(self.sale_price) != expected:
            raise ValidationError({"sale_price": [f"Sale price must be {expected} for a {self.sale_percentage}% sale"]})

    @classmethod
    def create(
        cls,
        name,
        description,
        price,
        category,
        image_url=None,
        stock=0,
        is_available=True,
    ):
        from storefront.product.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=round_money(price),
            category=category,
            image_url=image_url or DEFAULT_IMAGE_URL,
            stock=stock if stock is not None else 0,
            is_available=True if is_available is None else is_available,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                category=product.category,
                price=product.price,
                stock=product.stock,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def current_effective_price(self):
        """Sale price while on sale, regular price otherwise."""
        if self.on_sale and self.sale_price is not None:
            return self.sale_price
        return self.price

    def update_details(
        self,
        name=_UNSET,
        description=_UNSET,
        price=_UNSET,
        category=_UNSET,
        image_url=_UNSET,
        stock=_UNSET,
        is_available=_UNSET,
    ):
        """Edit product details. Only the arguments that are passed change.

        A new price on a product that is on sale re-derives its sale price.
        """
        from storefront.product.events import ProductUpdated

        with atomic_change(self):
            if name is not _UNSET and name is not None:
                self.name = name
            if description is not _UNSET and description is not None:
                self.description = description
            if category is not _UNSET and category is not None:
                self.category = category
            if image_url is not _UNSET and image_url is not None:
                self.image_url = image_url
            if is_available is not _UNSET and is_available is not None:
                self.is_available = is_available
            if price is not _UNSET and price is not None:
                self.price = round_money(price)
                if self.on_sale and self.sale_percentage:
                    self.sale_price = discounted_price(self.price, self.sale_percentage)

        if stock is not _UNSET and stock is not None:
            self.set_stock(stock)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                price=self.price,
                sale_price=self.sale_price,
                category=self.category,
                is_available=str(self.is_available),
                updated_at=now,
            )
        )

    def apply_sale(self, sale_percentage):
        """Discount the product by a percentage. Zero percent clears the sale."""
        from storefront.product.events import SaleApplied

        if sale_percentage is None or not 0 <= sale_percentage <= 100:
            raise InvalidRequest("Sale percentage must be between 0 and 100")

        if sale_percentage == 0:
            self.remove_sale()
            return

        with atomic_change(self):
            self.on_sale = True
            self.sale_percentage = sale_percentage
            self.sale_price = discounted_price(self.price, sale_percentage)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            SaleApplied(
                product_id=self.id,
                sale_percentage=self.sale_percentage,
                price=self.price,
                sale_price=self.sale_price,
            )
        )

    def remove_sale(self):
        from storefront.product.events import SaleRemoved

        with atomic_change(self):
            self.on_sale = False
            self.sale_percentage = 0.0
            self.sale_price = None

        self.updated_at = datetime.now(UTC)
        self.raise_(SaleRemoved(product_id=self.id, price=self.price))

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def has_stock_for(self, quantity):
        return quantity <= (self.stock or 0)

    def adjust_stock(self, delta, reason=StockReason.MANUAL.value):
        """Change stock by ``delta`` units. Fails without side effects below zero."""
        from storefront.product.events import StockAdjusted

        previous = self.stock or 0
        new_stock = previous + delta
        if new_stock < 0:
            raise InsufficientStock(str(self.id), self.name, previous, requested=-delta)

        self.stock = new_stock
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockAdjusted(
                product_id=self.id,
                previous_stock=previous,
                new_stock=new_stock,
                delta=delta,
                reason=reason,
                adjusted_at=now,
            )
        )

    def set_stock(self, quantity):
        if quantity is None or quantity < 0:
            raise InvalidRequest("Stock cannot be negative")
        delta = quantity - (self.stock or 0)
        if delta:
            self.adjust_stock(delta, reason=StockReason.MANUAL.value)
