"""Relational schema management for the storefront's SQL providers.

Memory providers need no schema; only ``postgresql`` and ``sqlite`` providers
are touched.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SQL_PROVIDERS = ("postgresql", "sqlite")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield name, provider


def _register_models(domain: Domain, provider_name: str) -> None:
    # Building a DAO registers the element's table with the provider metadata
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every aggregate and entity. Returns the provider names handled."""
    handled = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            _register_models(domain, name)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            logger.info("schema_created", provider=name, tables=sorted(provider._metadata.tables))
            handled.append(name)
    return handled


def drop_db(domain: Domain) -> list[str]:
    """Drop the tables created by ``setup_db``."""
    handled = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            _register_models(domain, name)
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            logger.info("schema_dropped", provider=name)
            handled.append(name)
    return handled
