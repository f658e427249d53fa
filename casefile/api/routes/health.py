"""Health check and diagnostics API endpoints."""

import os

from fastapi import APIRouter, Depends

from casefile.config import settings
from casefile.core.exceptions import AppError
from casefile.dependencies import RepositorySelector, get_repository_selector
from casefile.models.records import RecordKind
from casefile.models.response import DiagnosticsResponse, HealthCheckResponse
from casefile.repositories.csv_repository import CsvRecordRepository
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()

CLIENT_SAMPLE_SIZE = 5


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Check if the service is running and its default backend is readable",
    operation_id="get_service_health_status",
)
async def health_check(
    selector: RepositorySelector = Depends(get_repository_selector),
) -> HealthCheckResponse:
    """Health check endpoint."""
    backend_health = await selector.select().health_check()

    return HealthCheckResponse(
        status="healthy" if backend_health["status"] == "healthy" else "degraded",
        version=settings.app_version,
        service=settings.app_name,
    )


@router.get("/health/detailed")
async def detailed_health(
    selector: RepositorySelector = Depends(get_repository_selector),
):
    """Detailed health check covering both backends."""
    csv_health = await selector.csv_repository.health_check()
    mongo_health = await selector.mongo_repository.health_check()

    return {
        "status": "healthy" if csv_health["status"] == "healthy" or mongo_health["status"] == "healthy" else "degraded",
        "default_backend": selector.select().name,
        "csv": csv_health,
        "mongo": mongo_health,
        "version": settings.app_version,
    }


@router.get(
    "/diagnostics",
    response_model=DiagnosticsResponse,
    summary="Data directory diagnostics",
    operation_id="get_data_diagnostics",
)
async def diagnostics(
    selector: RepositorySelector = Depends(get_repository_selector),
) -> DiagnosticsResponse:
    """List CSV files and a sample of normalized client records."""
    csv_repository = selector.csv_repository
    csv_files = []
    data_path = settings.data.data_path
    if isinstance(csv_repository, CsvRecordRepository):
        csv_files = csv_repository.list_csv_files()
        data_path = csv_repository.data_settings.data_path

    client_sample = []
    try:
        client_sample = (await csv_repository.load(RecordKind.CLIENT))[:CLIENT_SAMPLE_SIZE]
    except AppError as e:
        LOGGER.warning(f"Could not load client sample: {e}")

    return DiagnosticsResponse(
        current_dir=os.getcwd(),
        data_dir=str(data_path),
        csv_files=csv_files,
        client_sample=client_sample,
    )
