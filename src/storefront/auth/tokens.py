"""Bearer tokens — compact ``header.payload.signature`` strings signed with HMAC-SHA256.

Claims:
    sub   user id
    role  user role at issue time
    iat   issued-at, seconds since the epoch
    exp   expiry, seconds since the epoch
"""

import base64
import hashlib
import hmac
import json
import time

from storefront.auth.principal import Principal
from storefront.config import get_settings
from storefront.errors import Unauthorized

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _encode_json(data: dict) -> str:
    return _b64encode(json.dumps(data, separators=(",", ":"), sort_keys=True).encode())


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode(), message, hashlib.sha256).digest()


def issue_token(user_id, role, now=None, ttl=None, secret=None) -> str:
    settings = get_settings()
    issued_at = int(now if now is not None else time.time())
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": issued_at,
        "exp": issued_at + (ttl if ttl is not None else settings.token_ttl),
    }

    header_b64 = _encode_json(_HEADER)
    payload_b64 = _encode_json(payload)
    signature = _sign(f"{header_b64}.{payload_b64}".encode(), secret or settings.token_secret)
    return f"{header_b64}.{payload_b64}.{_b64encode(signature)}"


def decode_token(token: str, now=None, secret=None) -> dict:
    """Verify the signature and expiry of ``token`` and return its claims.

    Raises:
        Unauthorized: malformed, forged or expired token.
    """
    try:
        header_b64, payload_b64, signature_b64 = token.split(".")
    except (AttributeError, ValueError):
        raise Unauthorized("Not authorized, token failed") from None

    expected = _sign(f"{header_b64}.{payload_b64}".encode(), secret or get_settings().token_secret)
    try:
        signature = _b64decode(signature_b64)
        payload = json.loads(_b64decode(payload_b64))
    except (ValueError, json.JSONDecodeError):
        raise Unauthorized("Not authorized, token failed") from None

    if not hmac.compare_digest(signature, expected):
        raise Unauthorized("Not authorized, token failed")

    if not isinstance(payload, dict) or "sub" not in payload or "exp" not in payload:
        raise Unauthorized("Not authorized, token failed")

    current = now if now is not None else time.time()
    if current >= payload["exp"]:
        raise Unauthorized("Not authorized, token expired")

    return payload


def principal_from_token(token: str) -> Principal:
    claims = decode_token(token)
    return Principal(user_id=str(claims["sub"]), role=claims.get("role", "user"))
