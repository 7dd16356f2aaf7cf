"""Application settings read from the environment.

Protean's own configuration (databases, processing modes) lives in
``domain.toml``; this module covers the settings that belong to the storefront
itself.
"""

import os
from dataclasses import dataclass

DEFAULT_TOKEN_TTL = 30 * 24 * 60 * 60  # 30 days
_DEV_SECRET = "storefront-development-secret"


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    token_secret: str
    token_ttl: int
    strict_status_transitions: bool
    admin_email: str | None
    admin_password: str | None


def get_settings() -> Settings:
    """Read settings fresh on each call so tests can monkeypatch the environment."""
    return Settings(
        token_secret=os.getenv("STOREFRONT_TOKEN_SECRET", _DEV_SECRET),
        token_ttl=int(os.getenv("STOREFRONT_TOKEN_TTL", DEFAULT_TOKEN_TTL)),
        strict_status_transitions=_as_bool(os.getenv("STOREFRONT_STRICT_STATUS_TRANSITIONS")),
        admin_email=os.getenv("STOREFRONT_ADMIN_EMAIL"),
        admin_password=os.getenv("STOREFRONT_ADMIN_PASSWORD"),
    )
