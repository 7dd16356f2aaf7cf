"""FastAPI dependencies resolving the bearer token to a Principal."""

from fastapi import Depends, Header

from storefront.auth.principal import Principal, ensure_admin
from storefront.errors import Unauthorized
from storefront.user.authentication import authenticate


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise Unauthorized("Not authorized, no token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Not authorized, no token")
    return token.strip()


async def get_principal(authorization: str | None = Header(default=None)) -> Principal:
    principal, _ = authenticate(_bearer_token(authorization))
    return principal


async def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    ensure_admin(principal)
    return principal
