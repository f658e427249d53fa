"""MongoDB-backed row source."""

import re
from typing import Any, Dict, List, Mapping

from pymongo.errors import PyMongoError

from casefile.core.exceptions import DataSourceError
from casefile.database.client import MongoClientManager
from casefile.models.records import NormalizedRecord, RecordKind
from casefile.repositories.base_repository import RecordRepository
from casefile.services.normalization.field_normalizer import normalize_file_number, normalize_record
from casefile.services.search.search_matcher import SEARCH_FIELDS, normalize_query
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)


def document_to_record(document: Mapping[str, Any]) -> NormalizedRecord:
    """Strip the Mongo ``_id`` and re-apply normalization to a stored document."""
    return normalize_record({k: v for k, v in document.items() if k != "_id"})


class MongoRecordRepository(RecordRepository):
    """Row source reading the ``clients``, ``intakes``, ``counselors`` and
    ``sessions`` collections. Documents are stored with canonical field names
    by the migration job.
    """

    name = "mongo"

    def __init__(self, client_manager: MongoClientManager):
        super().__init__()
        self.client_manager = client_manager

    async def _find(self, kind: RecordKind, query: Dict[str, Any]) -> List[NormalizedRecord]:
        try:
            cursor = self.client_manager.collection(kind).find(query)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            self.logger.error(
                f"MongoDB query on {kind.collection_name} failed",
                exc_info=True,
                extra={"kind": kind.value},
            )
            raise DataSourceError("Failed to query document store", original_error=e) from e
        return [document_to_record(document) for document in documents]

    async def load(self, kind: RecordKind) -> List[NormalizedRecord]:
        return await self._find(kind, {})

    async def find_by_file_number(
        self, kind: RecordKind, file_number: str
    ) -> List[NormalizedRecord]:
        return await self._find(kind, {"file_number": normalize_file_number(file_number)})

    async def search_file_numbers(self, query: str) -> List[str]:
        pattern = re.escape(normalize_query(query))
        seen: Dict[str, None] = {}
        for kind in RecordKind:
            filter_ = {
                "$or": [
                    {field: {"$regex": pattern, "$options": "i"}}
                    for field in SEARCH_FIELDS[kind]
                ]
            }
            for record in await self._find(kind, filter_):
                file_number = normalize_file_number(record.get("file_number"))
                if file_number:
                    seen.setdefault(file_number, None)
        return list(seen)

    async def count(self, kind: RecordKind) -> int:
        try:
            return await self.client_manager.collection(kind).count_documents({})
        except PyMongoError as e:
            raise DataSourceError("Failed to query document store", original_error=e) from e

    async def health_check(self) -> Dict[str, Any]:
        health = await self.client_manager.health_check()
        return {**health, "backend": self.name}
