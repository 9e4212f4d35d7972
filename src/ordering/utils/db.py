from protean.domain import Domain
from sqlalchemy import create_engine

from ordering.config import Settings

_SQL_PROVIDERS = ("sqlite", "postgresql")


def database_config(settings: Settings) -> dict:
    """Provider configuration for ``settings.database_url``."""
    if settings.uses_memory_store:
        return {"provider": "memory"}

    provider = "sqlite" if settings.database_url.startswith("sqlite") else "postgresql"
    return {"provider": provider, "database_uri": settings.database_url}


def configure_database(domain: Domain, settings: Settings) -> None:
    """Point the domain's default provider at the configured database and (re)initialize it.

    A domain already initialized against the same database is left as is, along with its data.
    """
    config = database_config(settings)
    if len(domain.providers) and domain.config["databases"]["default"] == config:
        return

    domain.config["databases"]["default"] = config
    domain.init()


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def setup_db(domain: Domain):
    """Setup database schema"""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            for _, aggregate_record in domain.registry.aggregates.items():
                if aggregate_record.cls.meta_.provider == provider.name:
                    domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

            for _, entity_record in domain.registry.entities.items():
                if entity_record.cls.meta_.provider == provider.name:
                    domain.repository_for(entity_record.cls)._dao  # noqa: B018

            # Force DAO creation for outbox tables (registered as internal)
            if hasattr(domain, "_outbox_repos") and provider.name in domain._outbox_repos:
                domain._outbox_repos[provider.name]._dao  # noqa: B018

            provider._metadata.create_all(engine)
            engine.dispose()


def drop_db(domain: Domain):
    """Drop database schema"""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            engine.dispose()
