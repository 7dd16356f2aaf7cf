"""Repository for the Product aggregate — lookup and catalogue listing queries."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_id(self, product_id) -> Product | None:
        """Find a product by id, or None when it does not exist."""
        try:
            return self.get(str(product_id))
        except ObjectNotFoundError:
            return None

    def search(self, keyword=None, category=None, on_sale=False, page=1, limit=8):
        """Newest-first page of products matching the filters.

        Returns a ``(products, total)`` tuple where ``total`` counts every
        matching product, not just the page.
        """
        criteria = {}
        if keyword:
            criteria["name__icontains"] = keyword
        if category:
            criteria["category"] = category
        if on_sale:
            criteria["on_sale"] = True

        query = self._dao.query
        if criteria:
            query = query.filter(**criteria)

        results = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
        return results.items, results.total
