"""Case-insensitive substring matching over record fields."""

import re
from typing import Any, Dict, Iterable, List, Mapping

from casefile.config import settings
from casefile.models.records import NormalizedRecord, RecordKind
from casefile.services.names.name_extractor import get_field
from casefile.services.normalization.field_normalizer import normalize_file_number
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)

_CLIENT_NAME_FIELDS = [
    f"client{i}_{part}_name" for i in range(1, 5) for part in ("first", "last")
]

# Fields searched per record kind for free-text queries
SEARCH_FIELDS: Dict[RecordKind, List[str]] = {
    RecordKind.CLIENT: ["file_number", "file_name", *_CLIENT_NAME_FIELDS],
    RecordKind.INTAKE: ["file_number"],
    RecordKind.COUNSELOR: ["file_number", "counselor_first_name", "counselor_last_name"],
    RecordKind.SESSION: ["file_number"],
}

_FILE_NUMBER_QUERY_RE = re.compile(r"^\d+$")


def normalize_query(query: str) -> str:
    return query.lower().strip()


def is_file_number_query(query: str) -> bool:
    """All-digit queries are treated as exact file numbers."""
    return bool(_FILE_NUMBER_QUERY_RE.match(query.strip()))


def search(
    records: Iterable[NormalizedRecord],
    query: str,
    fields: List[str],
) -> List[NormalizedRecord]:
    """Return records where any of ``fields`` contains ``query``.

    Matching is a case-insensitive substring test on the trimmed string form
    of each present value. Source order is preserved.

    Args:
        records: Records to scan
        query: Free-text query
        fields: Field names to test, looked up case-insensitively

    Returns:
        List[NormalizedRecord]: Matching records in source order
    """
    needle = normalize_query(query)
    matches: List[NormalizedRecord] = []

    for record in records:
        for field_name in fields:
            value = get_field(record, field_name)
            if value is None:
                continue
            if needle in str(value).lower().strip():
                if settings.log_match_details:
                    LOGGER.debug(
                        f"Found match in field '{field_name}'",
                        extra={"file_number": record.get("file_number"), "query": needle},
                    )
                matches.append(record)
                break

    return matches


def has_file_number(record: Mapping[str, Any], file_number: str) -> bool:
    return normalize_file_number(get_field(record, "file_number")) == file_number


def filter_by_file_number(
    records: Iterable[NormalizedRecord], file_number: str
) -> List[NormalizedRecord]:
    """Exact-string file number filter, source order preserved."""
    wanted = normalize_file_number(file_number)
    return [record for record in records if has_file_number(record, wanted)]


def collect_file_numbers(matches: Iterable[Mapping[str, Any]]) -> List[str]:
    """Ordered, de-duplicated file numbers of matched records."""
    seen: Dict[str, None] = {}
    for record in matches:
        file_number = normalize_file_number(get_field(record, "file_number"))
        if file_number:
            seen.setdefault(file_number, None)
    return list(seen)
