from protean.domain import Domain
from sqlalchemy import create_engine

from ordering.numbering.postgres_adapter import PostgresSequenceSource
from ordering.numbering.sources import ScanSequenceSource


def order_sequence_start() -> int:
    """First value the order number sequence may hand out, past any stored order."""
    return ScanSequenceSource().current_value() + 1


def _rdbms_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in ("sqlite", "postgresql"):
            yield provider


def setup_db(domain: Domain):
    """Setup database schema, plus the order number sequence on PostgreSQL"""
    with domain.domain_context():
        for provider in _rdbms_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            for _, aggregate_record in domain.registry.aggregates.items():
                if aggregate_record.cls.meta_.provider == provider.name:
                    domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

            for _, entity_record in domain.registry.entities.items():
                if entity_record.cls.meta_.provider == provider.name:
                    domain.repository_for(entity_record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)

            if provider.conn_info["provider"] == "postgresql":
                PostgresSequenceSource(provider.conn_info["database_uri"]).ensure(start=order_sequence_start())


def drop_db(domain: Domain):
    """Drop database schema"""
    with domain.domain_context():
        for provider in _rdbms_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)

            if provider.conn_info["provider"] == "postgresql":
                PostgresSequenceSource(provider.conn_info["database_uri"]).drop()
