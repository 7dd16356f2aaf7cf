"""User aggregate root with Address entity and EmailPreferences value object.

A user owns orders and an address book. The address book keeps exactly one
default address whenever it holds any addresses.
"""

import re
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, HasMany, List, String, ValueObject

from storefront.auth.passwords import hash_password, verify_password
from storefront.auth.principal import Role
from storefront.domain import storefront
from storefront.errors import InvalidRequest, NotFound

_EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def normalize_email(email) -> str:
    return (email or "").strip().lower()


@storefront.value_object(part_of="User")
class EmailPreferences:
    newsletter: Boolean(default=True)
    promotions: Boolean(default=True)
    product_updates: Boolean(default=True)


@storefront.entity(part_of="User")
class Address:
    """An entry in the user's address book."""

    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    is_default: Boolean(default=False)


@storefront.aggregate
class User:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    role: String(choices=Role, default=Role.USER.value)
    phone_number: String(max_length=20)
    bio: String(max_length=500)
    birth_date: Date()
    favorite_categories: List(content_type=String)
    email_preferences: ValueObject(EmailPreferences)
    addresses: HasMany(Address)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def email_must_look_like_an_address(self):
        if self.email and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Please enter a valid email"]})

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    @classmethod
    def register(cls, name, email, password, role=Role.USER.value):
        from storefront.user.events import UserRegistered

        now = datetime.now(UTC)
        user = cls(
            name=name.strip() if name else name,
            email=normalize_email(email),
            password_hash=hash_password(password),
            role=role,
            favorite_categories=[],
            email_preferences=EmailPreferences(),
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                name=user.name,
                email=user.email,
                registered_at=now,
            )
        )
        return user

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def check_password(self, password) -> bool:
        return verify_password(self.password_hash, password)

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(
        self,
        name=_UNSET,
        email=_UNSET,
        phone_number=_UNSET,
        bio=_UNSET,
        birth_date=_UNSET,
        favorite_categories=_UNSET,
        email_preferences=_UNSET,
    ):
        """Change profile fields. Only the arguments that are passed change."""
        from storefront.user.events import ProfileUpdated

        with atomic_change(self):
            if name is not _UNSET and name:
                self.name = name
            if email is not _UNSET and email:
                self.email = normalize_email(email)
            if phone_number is not _UNSET:
                self.phone_number = phone_number
            if bio is not _UNSET:
                self.bio = bio
            if birth_date is not _UNSET:
                self.birth_date = birth_date
            if favorite_categories is not _UNSET and favorite_categories is not None:
                self.favorite_categories = list(favorite_categories)
            if email_preferences is not _UNSET and email_preferences is not None:
                current = self.email_preferences or EmailPreferences()
                self.email_preferences = EmailPreferences(
                    newsletter=email_preferences.get("newsletter", current.newsletter),
                    promotions=email_preferences.get("promotions", current.promotions),
                    product_updates=email_preferences.get("product_updates", current.product_updates),
                )

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(ProfileUpdated(user_id=self.id, name=self.name, email=self.email, updated_at=now))

    def change_password(self, current_password, new_password):
        from storefront.user.events import PasswordChanged

        if not self.check_password(current_password):
            raise InvalidRequest("Current password is incorrect")

        self.password_hash = hash_password(new_password)
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(PasswordChanged(user_id=self.id, changed_at=now))

    def promote_to_admin(self):
        from storefront.user.events import UserPromoted

        if self.is_admin:
            return

        self.role = Role.ADMIN.value
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(UserPromoted(user_id=self.id, promoted_at=now))

    # -------------------------------------------------------------------
    # Address book
    # -------------------------------------------------------------------
    def _find_address(self, address_id):
        address = next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        if address is None:
            raise NotFound("Address not found")
        return address

    def add_address(self, street, city, state, postal_code, country, is_default=False):
        from storefront.user.events import AddressAdded

        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(
                street=street,
                city=city,
                state=state,
                postal_code=postal_code,
                country=country,
                is_default=is_default,
            )
            self.add_addresses(address)

        self.raise_(
            AddressAdded(
                user_id=self.id,
                address_id=address.id,
                city=city,
                country=country,
                is_default=str(is_default),
            )
        )
        return address

    def update_address(self, address_id, is_default=None, **fields):
        """Change address fields. Empty values keep the current value."""
        from storefront.user.events import AddressUpdated

        address = self._find_address(address_id)

        with atomic_change(self):
            for field, value in fields.items():
                if value:
                    setattr(address, field, value)
            if is_default and not address.is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False
                address.is_default = True

        self.raise_(AddressUpdated(user_id=self.id, address_id=address.id))
        return address

    def remove_address(self, address_id):
        from storefront.user.events import AddressRemoved

        address = self._find_address(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)

            # A removed default hands the flag to the first remaining address
            if was_default and self.addresses:
                self.addresses[0].is_default = True

        self.raise_(AddressRemoved(user_id=self.id, address_id=address_id))

    def set_default_address(self, address_id):
        from storefront.user.events import DefaultAddressChanged

        address = self._find_address(address_id)
        previous_default = next((a for a in self.addresses if a.is_default), None)

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.raise_(
            DefaultAddressChanged(
                user_id=self.id,
                address_id=address.id,
                previous_default_address_id=previous_default.id if previous_default else None,
            )
        )
