"""Schema setup seeds the PostgreSQL order number sequence past stored orders."""

import pytest
from ordering.domain import ordering
from ordering.utils import db

from tests.ordering.builders import persist_order


class _Metadata:
    def create_all(self, engine):
        pass


class _PostgresProvider:
    name = "orders-pg"
    conn_info = {"provider": "postgresql", "database_uri": "postgresql://localhost/petalbox"}
    _metadata = _Metadata()


class _RecordingSequence:
    starts = []

    def __init__(self, database_uri):
        self.database_uri = database_uri

    def ensure(self, start=1):
        self.starts.append(start)


@pytest.fixture()
def recorded_starts(monkeypatch):
    _RecordingSequence.starts = []
    monkeypatch.setattr(db, "_rdbms_providers", lambda domain: [_PostgresProvider()])
    monkeypatch.setattr(db, "create_engine", lambda uri: None)
    monkeypatch.setattr(db, "PostgresSequenceSource", _RecordingSequence)
    return _RecordingSequence.starts


class TestOrderSequenceStart:
    def test_empty_database_starts_at_one(self):
        assert db.order_sequence_start() == 1

    def test_starts_after_highest_stored_order(self):
        persist_order(order_number="PB-00007")
        persist_order(order_number="PB-00042")
        assert db.order_sequence_start() == 43


class TestSetupDb:
    def test_sequence_is_created_past_existing_orders(self, recorded_starts):
        persist_order(order_number="PB-00042")

        db.setup_db(ordering)

        assert recorded_starts == [43]
