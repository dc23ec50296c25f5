from protean.domain import Domain
from sqlalchemy import create_engine


def _relational_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in ("sqlite", "postgresql"):
            yield provider


def setup_db(domain: Domain):
    """Create tables for every relational provider of the domain"""
    with domain.domain_context():
        for provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching the repository's DAO registers the model with SQLAlchemy metadata
            for registry in (domain.registry.aggregates, domain.registry.entities):
                for _, record in registry.items():
                    if record.cls.meta_.provider == provider.name:
                        domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop tables for every relational provider of the domain"""
    with domain.domain_context():
        for provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
