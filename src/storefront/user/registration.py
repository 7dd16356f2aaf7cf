"""User registration — command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import Conflict
from storefront.user.user import User


@storefront.command(part_of="User")
class RegisterUser:
    """Create a new account. The email must not already be registered."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise Conflict("User already exists")

        user = User.register(
            name=command.name,
            email=command.email,
            password=command.password,
        )
        repo.add(user)
        logger.info("user_registered", user_id=str(user.id), email=user.email)
        return str(user.id)
