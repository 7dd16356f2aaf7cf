"""Credential checks and resolution of bearer tokens to known users."""

from protean.utils.globals import current_domain

from storefront.auth.principal import Principal
from storefront.auth.tokens import issue_token, principal_from_token
from storefront.domain import logger
from storefront.errors import Unauthorized
from storefront.user.user import User


def login(email, password):
    """Verify credentials and issue a bearer token.

    Returns a ``(user, token)`` tuple. An unknown email and a wrong password fail
    the same way so callers cannot probe for registered addresses.
    """
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None or not user.check_password(password):
        logger.warning("login_failed", email=(email or "").strip().lower())
        raise Unauthorized("Invalid email or password")

    return user, issue_token(user.id, user.role)


def token_for(user: User) -> str:
    return issue_token(user.id, user.role)


def authenticate(token: str) -> tuple[Principal, User]:
    """Resolve a bearer token to the principal and its current user record.

    The role comes from the stored user rather than the token, so a promotion
    takes effect without a new login.
    """
    claims_principal = principal_from_token(token)
    user = current_domain.repository_for(User).find_by_id(claims_principal.user_id)
    if user is None:
        raise Unauthorized("Not authorized, user not found")
    return Principal(user_id=str(user.id), role=user.role), user
