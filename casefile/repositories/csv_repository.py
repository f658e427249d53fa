"""CSV-backed row source with a load-once record cache."""

import asyncio
import csv
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from casefile.config import DataSettings
from casefile.core.exceptions import DataSourceError
from casefile.models.records import NormalizedRecord, RecordKind
from casefile.repositories.base_repository import RecordRepository
from casefile.services.normalization.field_normalizer import normalize_record
from casefile.services.search.search_matcher import (
    SEARCH_FIELDS,
    collect_file_numbers,
    filter_by_file_number,
    search,
)
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)


def iter_csv_rows(path: Path) -> Iterator[Dict[str, str]]:
    """Stream a header-first CSV as trimmed row mappings.

    Blank lines are skipped and blank or missing cells become "".

    Raises:
        DataSourceError: If the file is missing or cannot be parsed
    """
    if not path.exists():
        raise DataSourceError(f"CSV file does not exist: {path}")

    try:
        with path.open(newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f, delimiter=",")
            for row in reader:
                cleaned = {
                    key.strip(): (value or "").strip()
                    for key, value in row.items()
                    if isinstance(key, str)
                }
                if any(cleaned.values()):
                    yield cleaned
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise DataSourceError(f"Failed to read CSV file: {path}", original_error=e) from e


def read_csv_rows(path: Path) -> List[Dict[str, str]]:
    return list(iter_csv_rows(path))


class CsvRecordCache:
    """Parsed and normalized CSV content, loaded lazily per record kind.

    Once a kind is loaded its records are treated as immutable until
    ``reload`` is called. Two requests loading the same kind at once both
    parse the file and store identical content.
    """

    def __init__(self, data_settings: DataSettings):
        self.data_settings = data_settings
        self._records: Dict[RecordKind, List[NormalizedRecord]] = {}

    def path_for(self, kind: RecordKind) -> Path:
        file_names = {
            RecordKind.CLIENT: self.data_settings.client_file,
            RecordKind.INTAKE: self.data_settings.intake_file,
            RecordKind.COUNSELOR: self.data_settings.counselor_file,
            RecordKind.SESSION: self.data_settings.session_file,
        }
        return self.data_settings.data_path / file_names[kind]

    def is_loaded(self, kind: RecordKind) -> bool:
        return kind in self._records

    async def get(self, kind: RecordKind) -> List[NormalizedRecord]:
        cached = self._records.get(kind)
        if cached is not None:
            return cached

        path = self.path_for(kind)
        LOGGER.info(f"Loading CSV file from: {path}")
        rows = await asyncio.to_thread(read_csv_rows, path)
        records = [normalize_record(row) for row in rows]
        self._records[kind] = records
        LOGGER.info(
            f"Loaded {len(records)} {kind.value} records",
            extra={"kind": kind.value, "path": str(path)},
        )
        return records

    def reload(self, kind: Optional[RecordKind] = None) -> None:
        """Drop cached records so the next read parses the file again."""
        if kind is None:
            self._records.clear()
        else:
            self._records.pop(kind, None)


class CsvRecordRepository(RecordRepository):
    """Row source reading one CSV file per record kind."""

    name = "csv"

    def __init__(self, data_settings: DataSettings, cache: Optional[CsvRecordCache] = None):
        super().__init__()
        self.data_settings = data_settings
        self.cache = cache or CsvRecordCache(data_settings)

    async def load(self, kind: RecordKind) -> List[NormalizedRecord]:
        return await self.cache.get(kind)

    async def find_by_file_number(
        self, kind: RecordKind, file_number: str
    ) -> List[NormalizedRecord]:
        return filter_by_file_number(await self.load(kind), file_number)

    async def search_file_numbers(self, query: str) -> List[str]:
        matches: List[NormalizedRecord] = []
        for kind in RecordKind:
            matches.extend(search(await self.load(kind), query, SEARCH_FIELDS[kind]))
        return collect_file_numbers(matches)

    async def health_check(self) -> Dict[str, Any]:
        missing = [
            self.cache.path_for(kind).name
            for kind in RecordKind
            if not self.cache.path_for(kind).exists()
        ]
        return {
            "status": "healthy" if not missing else "unhealthy",
            "backend": self.name,
            "data_dir": str(self.data_settings.data_path),
            "missing_files": missing,
            "loaded": [kind.value for kind in RecordKind if self.cache.is_loaded(kind)],
        }

    def list_csv_files(self) -> List[Dict[str, str]]:
        """CSV files present in the data directory."""
        data_path = self.data_settings.data_path
        if not data_path.is_dir():
            return []
        return [
            {"path": str(path), "name": path.name}
            for path in sorted(data_path.glob("*.csv"))
        ]
