"""One-off import of the CSV datasets into MongoDB.

Rows pass through the same field normalizer the CSV backend uses, so the
stored documents carry canonical field names. Clients and intakes are keyed
by file number, counselor assignments by file number plus counselor name,
and sessions by a content hash so the import can be rerun safely.
"""

import hashlib
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ASCENDING, TEXT, UpdateOne
from pymongo.errors import PyMongoError

from casefile.config import DataSettings
from casefile.core.exceptions import DataSourceError
from casefile.database.client import MongoClientManager
from casefile.models.records import NormalizedRecord, RecordKind
from casefile.repositories.csv_repository import CsvRecordCache, iter_csv_rows
from casefile.services.aggregation.file_aggregator import parse_date
from casefile.services.normalization.field_normalizer import normalize_record
from casefile.services.search.search_matcher import SEARCH_FIELDS
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_BATCH_SIZE = 2000
SESSION_NOTE_KEY_LENGTH = 64

SESSION_KEY_FIELDS = [
    "file_number",
    "session_date",
    "session_status",
    "session_payment_status",
    "supervision_group",
    "payment_method",
    "session_fee",
]


def session_id_for(record: NormalizedRecord) -> str:
    """Deterministic session key: sha1 of the identifying fields joined by ``|``.

    Only the first 64 characters of the note take part.
    """
    parts: List[Any] = [record.get(field) for field in SESSION_KEY_FIELDS]
    parts.append(str(record.get("session_note") or "")[:SESSION_NOTE_KEY_LENGTH])
    key_input = "|".join("" if part is None else str(part) for part in parts)
    return hashlib.sha1(key_input.encode("utf-8")).hexdigest()


@dataclass
class MigrationOptions:
    """Command-line switches for the session import."""

    skip_sessions: bool = False
    sessions_limit: Optional[int] = None
    since: Optional[str] = None
    batch_size: int = DEFAULT_BATCH_SIZE
    dry_run: bool = False


@dataclass
class MigrationReport:
    """Counts of documents prepared and written per collection."""

    clients: int = 0
    intakes: int = 0
    counselors: int = 0
    sessions_read: int = 0
    sessions_imported: int = 0
    sessions_written: int = 0
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class MongoMigrationJob:
    """Import the four CSV datasets into their MongoDB collections."""

    def __init__(
        self,
        client_manager: MongoClientManager,
        data_settings: DataSettings,
        options: Optional[MigrationOptions] = None,
    ):
        self.client_manager = client_manager
        self.data_settings = data_settings
        self.options = options or MigrationOptions()
        self.paths = CsvRecordCache(data_settings)

    def _read(self, kind: RecordKind) -> List[NormalizedRecord]:
        return [normalize_record(row) for row in iter_csv_rows(self.paths.path_for(kind))]

    async def _bulk_write(self, kind: RecordKind, operations: List[UpdateOne]) -> int:
        if not operations or self.options.dry_run:
            return 0
        try:
            result = await self.client_manager.collection(kind).bulk_write(operations, ordered=False)
        except PyMongoError as e:
            raise DataSourceError(
                f"Bulk write to {kind.collection_name} failed", original_error=e
            ) from e
        return (result.upserted_count or 0) + (result.modified_count or 0)

    async def _create_indexes(self, kind: RecordKind, indexes: Iterable[Dict[str, Any]]) -> None:
        if self.options.dry_run:
            return
        collection = self.client_manager.collection(kind)
        try:
            for index in indexes:
                await collection.create_index(index["keys"], **index.get("options", {}))
        except PyMongoError as e:
            raise DataSourceError(
                f"Index creation on {kind.collection_name} failed", original_error=e
            ) from e

    async def import_keyed(self, kind: RecordKind, key_fields: List[str]) -> int:
        """Upsert every record of a kind keyed by ``key_fields``."""
        operations = [
            UpdateOne(
                {field: record.get(field) for field in key_fields},
                {"$set": record},
                upsert=True,
            )
            for record in self._read(kind)
            if record.get("file_number")
        ]
        await self._bulk_write(kind, operations)
        LOGGER.info(
            f"Prepared {len(operations)} {kind.collection_name} documents",
            extra={"kind": kind.value, "dry_run": self.options.dry_run},
        )
        return len(operations)

    async def import_sessions(self, report: MigrationReport) -> None:
        """Stream sessions in batches, honouring limit and since filters."""
        since_date: Optional[datetime] = parse_date(self.options.since) if self.options.since else None
        batch_size = max(1, self.options.batch_size)
        limit = self.options.sessions_limit
        batch: List[UpdateOne] = []

        LOGGER.info(
            "Streaming sessions",
            extra={"batch_size": batch_size, "limit": limit, "since": self.options.since},
        )

        for row in iter_csv_rows(self.paths.path_for(RecordKind.SESSION)):
            report.sessions_read += 1
            record = normalize_record(row)
            if not record.get("file_number"):
                continue

            if since_date is not None:
                session_date = parse_date(record.get("session_date"))
                if session_date is None or session_date < since_date:
                    continue

            session_id = session_id_for(record)
            batch.append(
                UpdateOne(
                    {"session_id": session_id},
                    {"$set": {**record, "session_id": session_id}},
                    upsert=True,
                )
            )
            report.sessions_imported += 1

            if len(batch) >= batch_size:
                report.sessions_written += await self._bulk_write(RecordKind.SESSION, batch)
                batch = []
                LOGGER.info(
                    f"Sessions progress: read={report.sessions_read} "
                    f"imported={report.sessions_imported} written={report.sessions_written}"
                )

            if limit and report.sessions_imported >= limit:
                break

        report.sessions_written += await self._bulk_write(RecordKind.SESSION, batch)

    async def run(self) -> MigrationReport:
        """Run the full import.

        Returns:
            MigrationReport: Per-collection counts

        Raises:
            DataSourceError: If a CSV file is unreadable or MongoDB rejects a write
        """
        report = MigrationReport(dry_run=self.options.dry_run)

        await self._create_indexes(RecordKind.CLIENT, [{"keys": [("file_number", ASCENDING)], "options": {"unique": True}}])
        await self._create_indexes(RecordKind.INTAKE, [{"keys": [("file_number", ASCENDING)], "options": {"unique": True}}])
        await self._create_indexes(RecordKind.COUNSELOR, [{"keys": [("file_number", ASCENDING)]}])

        report.clients = await self.import_keyed(RecordKind.CLIENT, ["file_number"])
        report.intakes = await self.import_keyed(RecordKind.INTAKE, ["file_number"])
        report.counselors = await self.import_keyed(
            RecordKind.COUNSELOR,
            ["file_number", "counselor_first_name", "counselor_last_name"],
        )

        if self.options.skip_sessions:
            LOGGER.info("Skipping sessions")
        else:
            await self.import_sessions(report)

        # Post-import indexes
        await self._create_indexes(
            RecordKind.SESSION,
            [
                {"keys": [("file_number", ASCENDING)]},
                {"keys": [("session_id", ASCENDING)], "options": {"unique": True}},
            ],
        )
        name_fields = [f for f in SEARCH_FIELDS[RecordKind.CLIENT] if f != "file_number"]
        await self._create_indexes(
            RecordKind.CLIENT,
            [{"keys": [(field, TEXT) for field in name_fields]}],
        )

        LOGGER.info("Migration completed", extra=report.to_dict())
        return report
