"""Client display name extraction.

Intake sheets carry the household name, per-client name pairs, or neither,
depending on the form revision. All of them are surfaced, household name
first.
"""

from typing import Any, List, Mapping, Optional

from casefile.config import settings
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)

MAX_CLIENTS_PER_FILE = 4

# Header spellings seen on records stored before field normalization existed
LEGACY_NAME_FIELDS = ["FILE NAME", "FILENAME", "CLIENT NAME", "CLIENTNAME"]


def get_field(record: Mapping[str, Any], field_name: str) -> Optional[Any]:
    """Look up a field by exact name, then by case-insensitive key match."""
    value = record.get(field_name)
    if value is not None:
        return value

    wanted = field_name.lower()
    for key, candidate in record.items():
        if isinstance(key, str) and key.lower() == wanted and candidate is not None:
            return candidate
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def extract_client_names(record: Mapping[str, Any]) -> List[str]:
    """Derive the ordered display names for a client record.

    Order: the whole-file name, then ``client1`` to ``client4`` first/last
    pairs. Legacy raw name columns are consulted only when neither produced
    a name.

    Args:
        record: Normalized client record (mixed-case keys tolerated)

    Returns:
        List[str]: Display names, possibly empty
    """
    names: List[str] = []

    file_name = _text(get_field(record, "file_name"))
    if file_name:
        names.append(file_name)

    for i in range(1, MAX_CLIENTS_PER_FILE + 1):
        first = _text(get_field(record, f"client{i}_first_name"))
        last = _text(get_field(record, f"client{i}_last_name"))
        full_name = " ".join(part for part in (first, last) if part).strip()
        if full_name:
            names.append(full_name)

    if not names:
        for legacy_field in LEGACY_NAME_FIELDS:
            legacy_name = _text(get_field(record, legacy_field))
            if legacy_name:
                names.append(legacy_name)
                break

    if settings.log_match_details:
        LOGGER.debug(
            "Extracted client names",
            extra={"file_number": record.get("file_number"), "names": names},
        )

    return names


def format_client_names(names: List[str]) -> str:
    """Join names into the single-line form used in result lists."""
    return ", ".join(names)
