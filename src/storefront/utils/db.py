"""Schema helpers for SQL-backed providers (SQLite and PostgreSQL).

The memory provider needs no schema, so each helper is a no-op unless the
active configuration points at a SQL database.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [p for p in domain.providers.values() if p.conn_info["provider"] in _SQL_PROVIDERS]


def _materialize_tables(domain: Domain, provider) -> None:
    # DAOs register their tables on the provider's metadata when first built
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every persisted element. Returns the providers touched."""
    touched = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _materialize_tables(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            touched.append(provider.name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    """Drop every table the domain created."""
    touched = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _materialize_tables(domain, provider)
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            touched.append(provider.name)
    return touched


def reset_db(domain: Domain) -> list[str]:
    drop_db(domain)
    return setup_db(domain)
