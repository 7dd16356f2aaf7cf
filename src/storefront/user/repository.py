"""Repository for the User aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.user.user import User, normalize_email


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_id(self, user_id) -> User | None:
        try:
            return self.get(str(user_id))
        except ObjectNotFoundError:
            return None

    def find_by_email(self, email) -> User | None:
        return self._dao.query.filter(email=normalize_email(email)).all().first
