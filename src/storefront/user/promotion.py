"""Granting the administrator role — command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.user.profile import load_user
from storefront.user.user import User


@storefront.command(part_of="User")
class PromoteToAdmin:
    user_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class PromoteToAdminHandler:
    @handle(PromoteToAdmin)
    def promote_to_admin(self, command):
        user = load_user(command.user_id)
        user.promote_to_admin()
        current_domain.repository_for(User).add(user)
        logger.info("user_promoted", user_id=str(user.id))
