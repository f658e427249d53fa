"""Domain and API models."""

from casefile.models.records import NormalizedRecord, RawRecord, RecordKind, RecordSources

__all__ = [
    "NormalizedRecord",
    "RawRecord",
    "RecordKind",
    "RecordSources",
]
