"""PostgreSQL-backed sequence source.

Uses a database sequence so that several application processes can place
orders against the same database without sharing a lock.
"""

import structlog
from sqlalchemy import create_engine, text

from ordering.numbering.port import SequenceSource

logger = structlog.get_logger(__name__)

SEQUENCE_NAME = "order_number_seq"


class PostgresSequenceSource(SequenceSource):
    def __init__(self, database_uri: str, sequence_name: str = SEQUENCE_NAME) -> None:
        self.sequence_name = sequence_name
        self._engine = create_engine(database_uri)

    def ensure(self, start: int = 1) -> None:
        """Create the sequence if it does not exist yet, and move an existing
        one forward so it never hands out a value below ``start``."""
        with self._engine.begin() as conn:
            conn.execute(text(f"CREATE SEQUENCE IF NOT EXISTS {self.sequence_name} START WITH {int(start)}"))
            if start > 1:
                conn.execute(
                    text(
                        f"SELECT setval('{self.sequence_name}', :floor) "
                        f"FROM {self.sequence_name} WHERE last_value <= :floor"
                    ),
                    {"floor": int(start) - 1},
                )
        logger.info("Order number sequence ensured", sequence=self.sequence_name, start=start)

    def drop(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(text(f"DROP SEQUENCE IF EXISTS {self.sequence_name}"))

    def next_value(self) -> int:
        with self._engine.begin() as conn:
            return int(conn.execute(text(f"SELECT nextval('{self.sequence_name}')")).scalar_one())
