"""Abstract sequence source port.

Order numbers are rendered from integers handed out by a SequenceSource.
Implementations must never return the same value twice within the database
they serve. Gaps are allowed: a value taken by a checkout that later fails is
simply skipped.
"""

from abc import ABC, abstractmethod


class SequenceSource(ABC):
    @abstractmethod
    def next_value(self) -> int:
        """Allocate and return the next order sequence value."""
