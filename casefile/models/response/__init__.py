"""Response models."""

from casefile.models.response.response import (
    DiagnosticsResponse,
    ErrorResponse,
    FileAggregate,
    FileSummary,
    HealthCheckResponse,
    ProviderEntry,
    SearchResponse,
    SessionEntry,
)

__all__ = [
    "DiagnosticsResponse",
    "ErrorResponse",
    "FileAggregate",
    "FileSummary",
    "HealthCheckResponse",
    "ProviderEntry",
    "SearchResponse",
    "SessionEntry",
]
