"""Search and file lookup services over a record repository."""

from typing import Any, List

from casefile.core.exceptions import CaseFileNotFoundError, ValidationError
from casefile.models.response import FileAggregate
from casefile.repositories.base_repository import RecordRepository
from casefile.services.aggregation.file_aggregator import aggregate, is_empty, sort_sessions_by_date
from casefile.services.base_service import BaseService
from casefile.services.normalization.field_normalizer import normalize_file_number


def _require_text(value: Any, message: str) -> str:
    # JSON clients send file numbers as bare integers too
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


async def build_aggregate(
    repository: RecordRepository, file_number: str, sort_sessions: bool = False
) -> FileAggregate:
    """Fetch one file's records from the repository and aggregate them."""
    sources = await repository.fetch_sources(file_number)
    result = aggregate(file_number, sources)
    if sort_sessions:
        result.sessions = sort_sessions_by_date(result.sessions)
    return result


class CaseSearchService(BaseService):
    """Free-text or file number search returning one aggregate per match."""

    def __init__(self, repository: RecordRepository):
        super().__init__(repository)
        self.repository: RecordRepository = repository

    def validate(self, query: Any, sort_sessions: bool = False) -> None:
        _require_text(query, "Query parameter is required")

    async def run(self, query: str, sort_sessions: bool = False) -> List[FileAggregate]:
        file_numbers = await self.repository.find_file_numbers(str(query))

        results = [
            await build_aggregate(self.repository, file_number, sort_sessions)
            for file_number in file_numbers
        ]

        self.logger.info(
            f"Search returned {len(results)} files",
            extra={"backend": self.repository.name, "results": len(results)},
        )
        return results


class FileLookupService(BaseService):
    """Direct lookup of a single file number."""

    def __init__(self, repository: RecordRepository):
        super().__init__(repository)
        self.repository: RecordRepository = repository

    def validate(self, file_number: Any, sort_sessions: bool = False) -> None:
        _require_text(file_number, "File number parameter is required")

    async def run(self, file_number: str, sort_sessions: bool = False) -> FileAggregate:
        key = normalize_file_number(file_number)
        result = await build_aggregate(self.repository, key, sort_sessions)

        if is_empty(result):
            self.logger.info(
                "File number not found",
                extra={"backend": self.repository.name, "file_number": key},
            )
            raise CaseFileNotFoundError(key)

        return result
