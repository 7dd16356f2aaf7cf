"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    price: Float(required=True)
    stock: Integer(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    """Product details (name, price, category, availability...) were edited."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    sale_price: Float()
    category: String(required=True)
    is_available: String(required=True)  # serialized bool
    updated_at: DateTime(required=True)


@storefront.event(part_of="Product")
class SaleApplied:
    """A percentage discount was applied to a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    sale_percentage: Float(required=True)
    price: Float(required=True)
    sale_price: Float(required=True)


@storefront.event(part_of="Product")
class SaleRemoved:
    """A product went back to its regular price."""

    __version__ = 1

    product_id: Identifier(required=True)
    price: Float(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """Units in stock changed: admin correction, order placement or cancellation."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    delta: Integer(required=True)
    reason: String(required=True, max_length=100)
    adjusted_at: DateTime(required=True)
