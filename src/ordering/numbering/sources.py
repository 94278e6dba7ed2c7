"""In-process sequence sources.

ScanSequenceSource reads the highest existing order number and adds one. Two
checkouts running at the same time can read the same number, so it is kept
only as the baseline the other sources are measured against.

LockedCounterSequenceSource serializes allocation behind a lock. It seeds
itself once from the scan and counts in memory afterwards, which is safe for
a single process sharing one database.
"""

import threading

import structlog
from protean.utils.globals import current_domain

from ordering.numbering.port import SequenceSource
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


class ScanSequenceSource(SequenceSource):
    def current_value(self) -> int:
        return current_domain.repository_for(Order).highest_number()

    def next_value(self) -> int:
        return self.current_value() + 1


class LockedCounterSequenceSource(SequenceSource):
    def __init__(self, seed: int | None = None, scan: ScanSequenceSource | None = None) -> None:
        self._lock = threading.Lock()
        self._value = seed
        self._scan = scan or ScanSequenceSource()

    def next_value(self) -> int:
        with self._lock:
            if self._value is None:
                self._value = self._scan.current_value()
                logger.debug("Order sequence seeded from existing orders", seed=self._value)
            self._value += 1
            return self._value
