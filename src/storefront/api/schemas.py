"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the internal Protean commands.
Business rules (sale percentage range, order quantities, status values) are
validated by the domain so clients get the domain's error messages.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class MessageResponse(BaseModel):
    message: str


class ShippingAddressSchema(BaseModel):
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str


# ---------------------------------------------------------------------------
# Auth and users
# ---------------------------------------------------------------------------
class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Doe",
                    "email": "jane@example.com",
                    "password": "secret123",
                }
            ]
        }
    }


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    token: str


class EmailPreferencesSchema(BaseModel):
    newsletter: bool = True
    promotions: bool = True
    product_updates: bool = True


class AddressRequest(BaseModel):
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool = False


class UpdateAddressRequest(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    is_default: bool | None = None


class AddressResponse(BaseModel):
    id: str
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str
    is_default: bool


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    bio: str | None = Field(default=None, max_length=500)
    birth_date: str | None = None
    favorite_categories: list[str] | None = None
    email_preferences: EmailPreferencesSchema | None = None
    current_password: str | None = None
    new_password: str | None = None


class UserProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    phone_number: str | None = None
    bio: str | None = None
    birth_date: str | None = None
    favorite_categories: list[str] = []
    email_preferences: EmailPreferencesSchema | None = None
    addresses: list[AddressResponse] = []


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str
    description: str
    price: float = Field(ge=0)
    category: str
    image_url: str | None = None
    stock: int = Field(ge=0, default=0)
    is_available: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Wireless Headphones",
                    "description": "Over-ear, noise cancelling",
                    "price": 199.99,
                    "category": "Electronics",
                    "stock": 25,
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
    image_url: str | None = None
    stock: int | None = Field(default=None, ge=0)
    is_available: bool | None = None


class SaleRequest(BaseModel):
    sale_percentage: float


class BulkSaleRequest(BaseModel):
    product_ids: list[str] = []
    sale_percentage: float


class BulkSaleResponse(BaseModel):
    message: str
    updated: list[str]


class StockRequest(BaseModel):
    """Either an absolute ``stock`` level or a relative ``delta``."""

    stock: int | None = None
    delta: int | None = None


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    price: float
    sale_price: float | None = None
    on_sale: bool
    sale_percentage: float
    effective_price: float
    category: str
    image_url: str | None = None
    stock: int
    is_available: bool
    created_at: str | None = None
    updated_at: str | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    page: int
    pages: int
    total: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemRequest(BaseModel):
    product_id: str
    quantity: int


class CreateOrderRequest(BaseModel):
    items: list[OrderItemRequest] = []
    shipping_address: ShippingAddressSchema
    payment_method: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "shipping_address": {
                        "street": "123 Main St",
                        "city": "Springfield",
                        "state": "IL",
                        "postal_code": "62701",
                        "country": "US",
                    },
                    "payment_method": "credit_card",
                }
            ]
        }
    }


class OrderStatusRequest(BaseModel):
    status: str


class PaymentStatusRequest(BaseModel):
    payment_status: str


class ProductSummary(BaseModel):
    id: str
    name: str
    price: float
    image_url: str | None = None


class OwnerSummary(BaseModel):
    id: str
    name: str
    email: str


class LineItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    product: ProductSummary | None = None


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[LineItemResponse]
    shipping_address: ShippingAddressSchema | None = None
    payment_method: str
    total_amount: float
    status: str
    payment_status: str
    created_at: str | None = None
    updated_at: str | None = None
    paid_at: str | None = None
    delivered_at: str | None = None
    cancelled_at: str | None = None
    user: OwnerSummary | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    page: int
    pages: int
    total: int
