"""Pydantic response models for the case file API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProviderEntry(BaseModel):
    """Counselor/provider assignment scoped to one file number."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, description="Counselor first and last name")
    therapy_type: Optional[str] = Field(default=None, alias="therapyType")
    intake_date: Optional[str] = Field(default=None, alias="intakeDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    location: Optional[str] = None
    status: Optional[str] = None
    location_detail: Optional[str] = Field(default=None, alias="locationDetail")


class SessionEntry(BaseModel):
    """Session history row scoped to one file number."""

    model_config = ConfigDict(populate_by_name=True)

    date: Optional[str] = None
    supervision_group: Optional[str] = Field(default=None, alias="supervisionGroup")
    status: Optional[str] = None
    payment_status: Optional[str] = Field(default=None, alias="paymentStatus")
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")
    fee: Optional[str] = None
    notes: Optional[str] = None


class FileSummary(BaseModel):
    """Headline figures derived from an aggregate."""

    model_config = ConfigDict(populate_by_name=True)

    intake_date: Optional[str] = Field(default=None, alias="intakeDate")
    latest_session_date: Optional[str] = Field(default=None, alias="latestSessionDate")
    provider_count: int = Field(default=0, alias="providerCount")
    session_count: int = Field(default=0, alias="sessionCount")


class FileAggregate(BaseModel):
    """Merged view of one case file.

    Attributes:
        file_number: Join key shared by all four record kinds
        client: Client record with intake fields overlaid and ``clientNames``
            attached, or None when neither source has the file
        providers: Every counselor assignment for the file
        sessions: Every session for the file
        summary: Derived intake and latest-session dates
    """

    model_config = ConfigDict(populate_by_name=True)

    file_number: str = Field(..., alias="fileNumber")
    client: Optional[Dict[str, Any]] = None
    providers: List[ProviderEntry] = Field(default_factory=list)
    sessions: List[SessionEntry] = Field(default_factory=list)
    summary: FileSummary = Field(default_factory=FileSummary)


class SearchResponse(BaseModel):
    """Response for search and file lookup endpoints."""

    results: List[FileAggregate] = Field(default_factory=list)
    backend: str = Field(default="csv", description="Backend that served the request")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "results": [
                        {
                            "fileNumber": "125477",
                            "client": {
                                "file_number": "125477",
                                "file_name": "CHEN, JULIA",
                                "clientNames": ["CHEN, JULIA"],
                            },
                            "providers": [{"name": "Ana Ruiz", "therapyType": "Individual"}],
                            "sessions": [{"date": "2024-03-02", "status": "Attended"}],
                        }
                    ],
                    "backend": "csv",
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Error payload returned with every non-2xx response."""

    error: str = Field(..., description="Short human-readable message")


class HealthCheckResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Service status
        version: Application version
        service: Service name
    """

    status: str = Field(
        default="healthy",
        description="Service health status",
        examples=["healthy", "degraded"],
    )
    version: str = Field(..., description="Application version", examples=["0.1.0"])
    service: str = Field(..., description="Service name", examples=["Case File Lookup"])


class DiagnosticsResponse(BaseModel):
    """Data directory listing and a sample of normalized client records."""

    model_config = ConfigDict(populate_by_name=True)

    current_dir: str = Field(..., alias="currentDir")
    data_dir: str = Field(..., alias="dataDir")
    csv_files: List[Dict[str, str]] = Field(default_factory=list, alias="csvFiles")
    client_sample: List[Dict[str, Any]] = Field(default_factory=list, alias="clientSample")
