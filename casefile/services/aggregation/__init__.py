"""Per-file-number aggregation."""

from casefile.services.aggregation.file_aggregator import (
    aggregate,
    is_empty,
    sort_sessions_by_date,
    summarize,
)

__all__ = ["aggregate", "is_empty", "sort_sessions_by_date", "summarize"]
