"""FastAPI routes for the Storefront — auth, users, products and orders."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.dependencies import get_principal, require_admin
from storefront.api.schemas import (
    AddressRequest,
    AddressResponse,
    AuthResponse,
    BulkSaleRequest,
    BulkSaleResponse,
    CreateOrderRequest,
    CreateProductRequest,
    LoginRequest,
    MessageResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusRequest,
    PaymentStatusRequest,
    ProductListResponse,
    ProductResponse,
    RegisterRequest,
    SaleRequest,
    StockRequest,
    UpdateAddressRequest,
    UpdateProductRequest,
    UpdateProfileRequest,
    UserProfileResponse,
)
from storefront.auth.principal import Principal
from storefront.errors import InvalidRequest
from storefront.order.cancellation import CancelOrder
from storefront.order.placement import PlaceOrder
from storefront.order.queries import get_order, list_all_orders, list_user_orders
from storefront.order.status import UpdateOrderStatus, UpdatePaymentStatus
from storefront.product.management import CreateProduct, DeleteProduct, UpdateProduct
from storefront.product.queries import DEFAULT_PAGE_SIZE, get_product, list_products
from storefront.product.sales import ApplyBulkSale, ApplySale, RemoveSale
from storefront.product.stock import AdjustStock, SetStock
from storefront.user.addresses import AddAddress, RemoveAddress, SetDefaultAddress, UpdateAddress
from storefront.user.authentication import login, token_for
from storefront.user.profile import UpdateProfile, load_user
from storefront.user.queries import serialize_address, serialize_user
from storefront.user.registration import RegisterUser

auth_router = APIRouter(prefix="/auth", tags=["auth"])
user_router = APIRouter(prefix="/users", tags=["users"])
product_router = APIRouter(prefix="/products", tags=["products"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _auth_response(user) -> AuthResponse:
    return AuthResponse(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        token=token_for(user),
    )


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
@auth_router.post("/register", status_code=201, response_model=AuthResponse)
async def register(body: RegisterRequest) -> AuthResponse:
    user_id = current_domain.process(
        RegisterUser(name=body.name, email=body.email, password=body.password),
        asynchronous=False,
    )
    return _auth_response(load_user(user_id))


@auth_router.post("/login", response_model=AuthResponse)
async def login_user(body: LoginRequest) -> AuthResponse:
    user, token = login(body.email, body.password)
    return AuthResponse(id=str(user.id), name=user.name, email=user.email, role=user.role, token=token)


@auth_router.get("/me", response_model=UserProfileResponse)
async def me(principal: Principal = Depends(get_principal)) -> dict:
    return serialize_user(load_user(principal.user_id))


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@user_router.put("/profile", response_model=UserProfileResponse)
async def update_profile(body: UpdateProfileRequest, principal: Principal = Depends(get_principal)) -> dict:
    command = UpdateProfile(
        user_id=principal.user_id,
        name=body.name,
        email=body.email,
        phone_number=body.phone_number,
        bio=body.bio,
        birth_date=body.birth_date,
        favorite_categories=json.dumps(body.favorite_categories) if body.favorite_categories is not None else None,
        email_preferences=json.dumps(body.email_preferences.model_dump()) if body.email_preferences else None,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    current_domain.process(command, asynchronous=False)
    return serialize_user(load_user(principal.user_id))


@user_router.get("/addresses", response_model=list[AddressResponse])
async def list_addresses(principal: Principal = Depends(get_principal)) -> list[dict]:
    return [serialize_address(a) for a in load_user(principal.user_id).addresses]


def _address(user_id, address_id) -> dict:
    user = load_user(user_id)
    return serialize_address(next(a for a in user.addresses if str(a.id) == str(address_id)))


@user_router.post("/addresses", status_code=201, response_model=AddressResponse)
async def add_address(body: AddressRequest, principal: Principal = Depends(get_principal)) -> dict:
    command = AddAddress(
        user_id=principal.user_id,
        street=body.street,
        city=body.city,
        state=body.state,
        postal_code=body.postal_code,
        country=body.country,
        is_default=body.is_default,
    )
    address_id = current_domain.process(command, asynchronous=False)
    return _address(principal.user_id, address_id)


@user_router.put("/addresses/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: str, body: UpdateAddressRequest, principal: Principal = Depends(get_principal)
) -> dict:
    command = UpdateAddress(
        user_id=principal.user_id,
        address_id=address_id,
        street=body.street,
        city=body.city,
        state=body.state,
        postal_code=body.postal_code,
        country=body.country,
        is_default=body.is_default,
    )
    current_domain.process(command, asynchronous=False)
    return _address(principal.user_id, address_id)


@user_router.delete("/addresses/{address_id}", response_model=MessageResponse)
async def remove_address(address_id: str, principal: Principal = Depends(get_principal)) -> MessageResponse:
    current_domain.process(RemoveAddress(user_id=principal.user_id, address_id=address_id), asynchronous=False)
    return MessageResponse(message="Address deleted successfully")


@user_router.put("/addresses/{address_id}/default", response_model=AddressResponse)
async def set_default_address(address_id: str, principal: Principal = Depends(get_principal)) -> dict:
    current_domain.process(SetDefaultAddress(user_id=principal.user_id, address_id=address_id), asynchronous=False)
    return _address(principal.user_id, address_id)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@product_router.get("", response_model=ProductListResponse)
async def search_products(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    keyword: str | None = None,
    category: str | None = None,
    sale: bool = False,
) -> dict:
    return list_products(keyword=keyword, category=category, on_sale=sale, page=page, limit=limit)


@product_router.post("/bulk-sale", response_model=BulkSaleResponse)
async def bulk_sale(body: BulkSaleRequest, _: Principal = Depends(require_admin)) -> BulkSaleResponse:
    updated = current_domain.process(
        ApplyBulkSale(product_ids=json.dumps(body.product_ids), sale_percentage=body.sale_percentage),
        asynchronous=False,
    )
    return BulkSaleResponse(message=f"{len(updated)} products updated", updated=updated)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def fetch_product(product_id: str) -> dict:
    return get_product(product_id)


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest, _: Principal = Depends(require_admin)) -> dict:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        image_url=body.image_url,
        stock=body.stock,
        is_available=body.is_available,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return get_product(product_id)


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest, _: Principal = Depends(require_admin)) -> dict:
    command = UpdateProduct(product_id=product_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return get_product(product_id)


@product_router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: str, _: Principal = Depends(require_admin)) -> MessageResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return MessageResponse(message="Product removed")


@product_router.put("/{product_id}/sale", response_model=ProductResponse)
async def apply_sale(product_id: str, body: SaleRequest, _: Principal = Depends(require_admin)) -> dict:
    current_domain.process(
        ApplySale(product_id=product_id, sale_percentage=body.sale_percentage),
        asynchronous=False,
    )
    return get_product(product_id)


@product_router.delete("/{product_id}/sale", response_model=ProductResponse)
async def remove_sale(product_id: str, _: Principal = Depends(require_admin)) -> dict:
    current_domain.process(RemoveSale(product_id=product_id), asynchronous=False)
    return get_product(product_id)


@product_router.put("/{product_id}/stock", response_model=ProductResponse)
async def update_stock(product_id: str, body: StockRequest, _: Principal = Depends(require_admin)) -> dict:
    if body.stock is not None:
        if body.stock < 0:
            raise InvalidRequest("Stock cannot be negative")
        command = SetStock(product_id=product_id, quantity=body.stock)
    elif body.delta is not None:
        command = AdjustStock(product_id=product_id, delta=body.delta)
    else:
        raise InvalidRequest("Provide either stock or delta")
    current_domain.process(command, asynchronous=False)
    return get_product(product_id)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, principal: Principal = Depends(get_principal)) -> dict:
    if not body.items:
        raise InvalidRequest("No order items")
    command = PlaceOrder(
        user_id=principal.user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_method=body.payment_method,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return get_order(order_id, principal)


@order_router.get("", response_model=list[OrderResponse])
async def my_orders(principal: Principal = Depends(get_principal)) -> list[dict]:
    return list_user_orders(principal)


@order_router.get("/admin/all", response_model=OrderListResponse)
async def all_orders(page: int = 1, limit: int = 10, principal: Principal = Depends(require_admin)) -> dict:
    return list_all_orders(principal, page=page, limit=limit)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def fetch_order(order_id: str, principal: Principal = Depends(get_principal)) -> dict:
    return get_order(order_id, principal)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, principal: Principal = Depends(get_principal)) -> dict:
    command = CancelOrder(
        order_id=order_id,
        requested_by=principal.user_id,
        requester_role=principal.role,
    )
    current_domain.process(command, asynchronous=False)
    return get_order(order_id, principal)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: OrderStatusRequest, principal: Principal = Depends(require_admin)
) -> dict:
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return get_order(order_id, principal)


@order_router.put("/{order_id}/payment", response_model=OrderResponse)
async def update_payment_status(
    order_id: str, body: PaymentStatusRequest, principal: Principal = Depends(require_admin)
) -> dict:
    current_domain.process(
        UpdatePaymentStatus(order_id=order_id, payment_status=body.payment_status),
        asynchronous=False,
    )
    return get_order(order_id, principal)
