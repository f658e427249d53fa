"""Search and file lookup API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Header

from casefile.dependencies import RepositorySelector, get_repository_selector
from casefile.models.request.search import FileLookupRequest, SearchRequest
from casefile.models.response import ErrorResponse, SearchResponse
from casefile.services.case_file_service import CaseSearchService, FileLookupService
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or malformed input"},
    500: {"model": ErrorResponse, "description": "Backend could not be read"},
}


@router.post(
    "/search",
    response_model=SearchResponse,
    responses=ERROR_RESPONSES,
    summary="Search case files",
    description="Find files by file number or client/counselor name fragment",
    operation_id="search_case_files",
)
async def search_files(
    request: SearchRequest,
    selector: RepositorySelector = Depends(get_repository_selector),
    x_backend: Optional[str] = Header(default=None),
) -> SearchResponse:
    """Search all four datasets and return one aggregate per file number."""
    repository = selector.select(x_backend, request.backend)
    service = CaseSearchService(repository)
    results = await service.execute(request.query, sort_sessions=request.sort_sessions)
    return SearchResponse(results=results, backend=repository.name)


@router.post(
    "/file",
    response_model=SearchResponse,
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "File not found"}},
    summary="Look up a case file",
    operation_id="lookup_case_file",
)
async def lookup_file(
    request: FileLookupRequest,
    selector: RepositorySelector = Depends(get_repository_selector),
    x_backend: Optional[str] = Header(default=None),
) -> SearchResponse:
    """Aggregate a single file number."""
    repository = selector.select(x_backend, request.backend)
    service = FileLookupService(repository)
    result = await service.execute(request.file_number, sort_sessions=request.sort_sessions)
    return SearchResponse(results=[result], backend=repository.name)


@router.get(
    "/file/{file_number}",
    response_model=SearchResponse,
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "File not found"}},
    summary="Look up a case file by path",
    operation_id="get_case_file",
)
async def get_file(
    file_number: str,
    sort_sessions: bool = False,
    selector: RepositorySelector = Depends(get_repository_selector),
    x_backend: Optional[str] = Header(default=None),
) -> SearchResponse:
    repository = selector.select(x_backend)
    service = FileLookupService(repository)
    result = await service.execute(file_number, sort_sessions=sort_sessions)
    return SearchResponse(results=[result], backend=repository.name)
