"""Schema management for SQL-backed providers.

The in-memory provider needs nothing; PostgreSQL and SQLite providers get
their tables created (or dropped) from the registered aggregates.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield name, provider


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every aggregate stored in a SQL provider."""
    prepared = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching the DAO registers the aggregate's model with the provider's metadata
            for _, record in domain.registry.aggregates.items():
                if record.cls.meta_.provider == name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)
            prepared.append(name)
            logger.info("database_ready", provider=name)

    return prepared


def drop_db(domain: Domain) -> list[str]:
    """Drop every table known to the SQL providers."""
    dropped = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            for _, record in domain.registry.aggregates.items():
                if record.cls.meta_.provider == name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.drop_all(engine)
            dropped.append(name)
            logger.info("database_dropped", provider=name)

    return dropped
