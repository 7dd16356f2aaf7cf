"""Repository for the Order aggregate — owner and administrator listings."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_id(self, order_id) -> Order | None:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            return None

    def for_user(self, user_id) -> list[Order]:
        """A user's orders, newest first."""
        return self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").all().items

    def page(self, page=1, limit=10):
        """Newest-first page of every order, with the overall count."""
        results = self._dao.query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
        return results.items, results.total
