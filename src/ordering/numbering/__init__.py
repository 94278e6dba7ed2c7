"""Sequence source factory.

Provides get_sequence_source() / set_sequence_source() to swap
implementations:
- LockedCounterSequenceSource by default (``custom.sequence_source = "counter"``)
- PostgresSequenceSource for multi-process deployments (``"postgresql"``)
- ScanSequenceSource, the unserialized baseline (``"scan"``)
"""

from protean.utils.globals import current_domain

from ordering.domain import custom_setting
from ordering.numbering.port import SequenceSource

_current_source: SequenceSource | None = None


def build_sequence_source(kind: str | None = None) -> SequenceSource:
    from ordering.numbering.sources import LockedCounterSequenceSource, ScanSequenceSource

    kind = kind or custom_setting("sequence_source", "counter")
    if kind == "postgresql":
        from ordering.numbering.postgres_adapter import PostgresSequenceSource

        return PostgresSequenceSource(current_domain.config["databases"]["default"]["database_uri"])
    if kind == "scan":
        return ScanSequenceSource()
    return LockedCounterSequenceSource()


def get_sequence_source() -> SequenceSource:
    """Return the active sequence source, building it from config on first use."""
    global _current_source
    if _current_source is None:
        _current_source = build_sequence_source()
    return _current_source


def set_sequence_source(source: SequenceSource) -> None:
    global _current_source
    _current_source = source


def reset_sequence_source() -> None:
    global _current_source
    _current_source = None
