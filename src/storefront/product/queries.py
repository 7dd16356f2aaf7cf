"""Read side for the catalogue — serialization and paginated listing."""

import math

from protean.utils.globals import current_domain

from storefront.product.management import load_product
from storefront.product.product import Product

DEFAULT_PAGE_SIZE = 8


def _iso(value):
    return value.isoformat() if value else None


def serialize_product(product: Product) -> dict:
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "sale_price": product.sale_price,
        "on_sale": product.on_sale,
        "sale_percentage": product.sale_percentage,
        "effective_price": product.current_effective_price(),
        "category": product.category,
        "image_url": product.image_url,
        "stock": product.stock,
        "is_available": product.is_available,
        "created_at": _iso(product.created_at),
        "updated_at": _iso(product.updated_at),
    }


def get_product(product_id) -> dict:
    return serialize_product(load_product(product_id))


def list_products(keyword=None, category=None, on_sale=False, page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    """Newest-first page of products: ``{products, page, pages, total}``."""
    page = max(int(page or 1), 1)
    limit = max(int(limit or DEFAULT_PAGE_SIZE), 1)

    products, total = current_domain.repository_for(Product).search(
        keyword=keyword, category=category, on_sale=on_sale, page=page, limit=limit
    )
    return {
        "products": [serialize_product(p) for p in products],
        "page": page,
        "pages": math.ceil(total / limit),
        "total": total,
    }
