"""File aggregation: one merged view per file number.

Client and intake rows are merged into a single client object, counselor
assignments and sessions are attached as collections. A file number that
only appears in session or provider history still produces an aggregate
with ``client`` set to None.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from casefile.models.records import NormalizedRecord, RecordSources
from casefile.models.response import FileAggregate, FileSummary, ProviderEntry, SessionEntry
from casefile.services.names.name_extractor import extract_client_names, get_field
from casefile.services.normalization.field_normalizer import normalize_file_number
from casefile.services.search.search_matcher import filter_by_file_number
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)

CLIENT_NAMES_KEY = "clientNames"

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%y",
    "%m-%d-%Y",
]


def parse_date(value: Any) -> Optional[datetime]:
    """Parse ISO or US-style dates; None when the value is not a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _join_name(first: Any, last: Any) -> Optional[str]:
    parts = [str(part).strip() for part in (first, last) if part is not None]
    name = " ".join(part for part in parts if part).strip()
    return name or None


def merge_client(
    client: Optional[NormalizedRecord], intake: Optional[NormalizedRecord]
) -> Optional[Dict[str, Any]]:
    """Overlay intake fields on the client record; intake wins on conflict."""
    if client is None and intake is None:
        return None

    merged: Dict[str, Any] = {}
    merged.update(client or {})
    merged.update(intake or {})
    merged[CLIENT_NAMES_KEY] = extract_client_names(merged)
    return merged


def project_provider(record: NormalizedRecord) -> ProviderEntry:
    """Counselor assignment row -> provider entry."""
    return ProviderEntry(
        name=_join_name(
            get_field(record, "counselor_first_name"),
            get_field(record, "counselor_last_name"),
        ),
        therapy_type=_as_text(get_field(record, "therapy_type")),
        intake_date=_as_text(get_field(record, "intake_date")),
        end_date=_as_text(get_field(record, "end_date")),
        location=_as_text(get_field(record, "location")),
        status=_as_text(get_field(record, "status")),
        location_detail=_as_text(get_field(record, "location_detail")),
    )


def project_session(record: NormalizedRecord) -> SessionEntry:
    """Session history row -> session entry."""
    return SessionEntry(
        date=_as_text(get_field(record, "session_date")),
        supervision_group=_as_text(get_field(record, "supervision_group")),
        status=_as_text(get_field(record, "session_status")),
        payment_status=_as_text(get_field(record, "session_payment_status")),
        payment_method=_as_text(get_field(record, "payment_method")),
        fee=_as_text(get_field(record, "session_fee")),
        notes=_as_text(get_field(record, "session_note")),
    )


def sort_sessions_by_date(
    sessions: List[SessionEntry], descending: bool = True
) -> List[SessionEntry]:
    """Stable sort by session date; undated sessions go last either way."""

    def sort_key(session: SessionEntry) -> Tuple[bool, datetime]:
        parsed = parse_date(session.date)
        if parsed is None:
            return (not descending, datetime.min)
        return (descending, parsed)

    # sorted() keeps ties in input order even with reverse=True
    return sorted(sessions, key=sort_key, reverse=descending)


def summarize(
    providers: List[ProviderEntry], sessions: List[SessionEntry]
) -> FileSummary:
    """Intake date from the first provider that has one, latest session date."""
    intake_date = next(
        (provider.intake_date for provider in providers if provider.intake_date),
        None,
    )
    session_dates = [d for d in (parse_date(s.date) for s in sessions) if d is not None]
    latest = max(session_dates) if session_dates else None

    return FileSummary(
        intake_date=intake_date,
        latest_session_date=_as_text(latest),
        provider_count=len(providers),
        session_count=len(sessions),
    )


def aggregate(file_number: str, sources: RecordSources) -> FileAggregate:
    """Assemble the aggregate for one file number.

    Never raises for unknown file numbers: the result then has no client and
    empty collections, and the caller decides whether that means not found.

    Args:
        file_number: File number to assemble (trimmed, compared exactly)
        sources: Records of each kind to search

    Returns:
        FileAggregate: Merged client, providers and sessions in source order
    """
    key = normalize_file_number(file_number)

    clients = filter_by_file_number(sources.clients, key)
    intakes = filter_by_file_number(sources.intakes, key)
    client = merge_client(
        clients[0] if clients else None,
        intakes[0] if intakes else None,
    )

    providers = [project_provider(r) for r in filter_by_file_number(sources.counselors, key)]
    sessions = [project_session(r) for r in filter_by_file_number(sources.sessions, key)]

    LOGGER.debug(
        "Aggregated file",
        extra={
            "file_number": key,
            "has_client": client is not None,
            "providers": len(providers),
            "sessions": len(sessions),
        },
    )

    return FileAggregate(
        file_number=key,
        client=client,
        providers=providers,
        sessions=sessions,
        summary=summarize(providers, sessions),
    )


def is_empty(file_aggregate: FileAggregate) -> bool:
    """True when no source held the file number."""
    return (
        file_aggregate.client is None
        and not file_aggregate.providers
        and not file_aggregate.sessions
    )
