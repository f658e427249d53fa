from abc import ABC, abstractmethod
from typing import Any, Dict, List

from casefile.models.records import NormalizedRecord, RecordKind, RecordSources
from casefile.services.normalization.field_normalizer import normalize_file_number
from casefile.services.search.search_matcher import is_file_number_query
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)


class RecordRepository(ABC):
    """Row source for the four record kinds.

    Subclasses read from one backend. The file number discovery policy is
    shared so both backends answer the same query the same way: an all-digit
    query is an exact file number lookup, anything else is a substring search
    over each kind's search fields.
    """

    name: str = "base"

    def __init__(self):
        self.logger = LOGGER

    @abstractmethod
    async def load(self, kind: RecordKind) -> List[NormalizedRecord]:
        """All records of a kind, normalized, in source order."""

    @abstractmethod
    async def find_by_file_number(
        self, kind: RecordKind, file_number: str
    ) -> List[NormalizedRecord]:
        """Records of a kind whose file number equals ``file_number`` exactly."""

    @abstractmethod
    async def search_file_numbers(self, query: str) -> List[str]:
        """File numbers of records whose search fields contain ``query``."""

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Backend status for the health endpoints."""

    async def count(self, kind: RecordKind) -> int:
        return len(await self.load(kind))

    async def has_file_number(self, file_number: str) -> bool:
        """True if any record kind holds the file number."""
        for kind in RecordKind:
            if await self.find_by_file_number(kind, file_number):
                return True
        return False

    async def find_file_numbers(self, query: str) -> List[str]:
        """Candidate file numbers for a query, in discovery order.

        Args:
            query: File number or free-text fragment

        Returns:
            List[str]: De-duplicated file numbers
        """
        if is_file_number_query(query):
            file_number = normalize_file_number(query)
            found = await self.has_file_number(file_number)
            self.logger.info(
                "Exact file number query",
                extra={"backend": self.name, "file_number": file_number, "found": found},
            )
            return [file_number] if found else []

        file_numbers = await self.search_file_numbers(query)
        self.logger.info(
            f"Search matched {len(file_numbers)} file numbers",
            extra={"backend": self.name, "matches": len(file_numbers)},
        )
        return file_numbers

    async def fetch_sources(self, file_number: str) -> RecordSources:
        """Every record of every kind for one file number."""
        key = normalize_file_number(file_number)
        return RecordSources(
            clients=await self.find_by_file_number(RecordKind.CLIENT, key),
            intakes=await self.find_by_file_number(RecordKind.INTAKE, key),
            counselors=await self.find_by_file_number(RecordKind.COUNSELOR, key),
            sessions=await self.find_by_file_number(RecordKind.SESSION, key),
        )
