"""Pydantic request models for search and file lookup endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    """Free-text search request.

    Attributes:
        query: File number or name fragment
        backend: Optional backend preference (``csv`` or ``mongo``)
        sort_sessions: Return sessions newest first instead of source order
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"query": "chen", "backend": "csv"}]},
    )

    # Presence and type are checked downstream so they surface as 400s or
    # reach backend resolution unchanged
    query: Optional[Any] = Field(default=None, description="File number or name fragment")
    backend: Optional[Any] = Field(default=None, description="csv, mongo, mongodb, true or 1")
    sort_sessions: bool = Field(default=False, alias="sortSessions")


class FileLookupRequest(BaseModel):
    """Direct file number lookup request."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"fileNumber": "125477"}]},
    )

    file_number: Optional[Any] = Field(default=None, alias="fileNumber")
    backend: Optional[Any] = Field(default=None, description="csv, mongo, mongodb, true or 1")
    sort_sessions: bool = Field(default=False, alias="sortSessions")
