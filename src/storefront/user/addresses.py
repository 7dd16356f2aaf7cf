"""Address book management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.user.profile import load_user
from storefront.user.user import User


@storefront.command(part_of="User")
class AddAddress:
    user_id: Identifier(required=True)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)
    is_default: Boolean(default=False)


@storefront.command(part_of="User")
class UpdateAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    street: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    postal_code: String(max_length=20)
    country: String(max_length=100)
    is_default: Boolean()


@storefront.command(part_of="User")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command(part_of="User")
class SetDefaultAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        user = load_user(command.user_id)
        address = user.add_address(
            street=command.street,
            city=command.city,
            state=command.state,
            postal_code=command.postal_code,
            country=command.country,
            is_default=bool(command.is_default),
        )
        current_domain.repository_for(User).add(user)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        user = load_user(command.user_id)
        user.update_address(
            command.address_id,
            is_default=command.is_default,
            street=command.street,
            city=command.city,
            state=command.state,
            postal_code=command.postal_code,
            country=command.country,
        )
        current_domain.repository_for(User).add(user)

    @handle(RemoveAddress)
    def remove_address(self, command):
        user = load_user(command.user_id)
        user.remove_address(command.address_id)
        current_domain.repository_for(User).add(user)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        user = load_user(command.user_id)
        user.set_default_address(command.address_id)
        current_domain.repository_for(User).add(user)
