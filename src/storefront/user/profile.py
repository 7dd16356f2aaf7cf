"""Profile management — command and handler."""

import json
from datetime import date

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import Conflict, InvalidRequest, NotFound
from storefront.user.user import _UNSET, User, normalize_email


@storefront.command(part_of="User")
class UpdateProfile:
    """Edit profile fields. Changing the password needs the current password."""

    user_id: Identifier(required=True)
    name: String(max_length=100)
    email: String(max_length=254)
    phone_number: String(max_length=20)
    bio: String(max_length=500)
    birth_date: String(max_length=10)  # ISO date
    favorite_categories: Text()  # JSON array
    email_preferences: Text()  # JSON object
    current_password: String(max_length=128)
    new_password: String(max_length=128)


def load_user(user_id) -> User:
    user = current_domain.repository_for(User).find_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _given(value, transform=None):
    if value is None:
        return _UNSET
    return transform(value) if transform else value


def _parse_date(value):
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidRequest(f"Invalid birth date: {value}") from None


@storefront.command_handler(part_of=User)
class UpdateProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = load_user(command.user_id)

        if command.email and normalize_email(command.email) != user.email:
            existing = repo.find_by_email(command.email)
            if existing is not None and str(existing.id) != str(user.id):
                raise Conflict("Email is already in use")

        user.update_profile(
            name=_given(command.name),
            email=_given(command.email),
            phone_number=_given(command.phone_number),
            bio=_given(command.bio),
            birth_date=_given(command.birth_date, _parse_date),
            favorite_categories=_given(command.favorite_categories, json.loads),
            email_preferences=_given(command.email_preferences, json.loads),
        )

        if command.new_password:
            if not command.current_password:
                raise InvalidRequest("Current password is required to set a new password")
            user.change_password(command.current_password, command.new_password)

        repo.add(user)
