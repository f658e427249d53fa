"""Cross-dataset consistency report.

Lists file numbers that appear in intake, counselor or session data without
a client record, and client files that are missing one of the other
datasets.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set

from casefile.models.records import NormalizedRecord, RecordKind
from casefile.repositories.base_repository import RecordRepository
from casefile.services.names.name_extractor import extract_client_names
from casefile.services.normalization.field_normalizer import normalize_file_number
from casefile.services.search.search_matcher import collect_file_numbers
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)

SAMPLE_SIZE = 10
NO_NAME = "(no name)"
NO_CLIENT = "(no client record)"


@dataclass
class ValidationReport:
    """Counts and samples of dataset inconsistencies."""

    file_counts: Dict[str, int] = field(default_factory=dict)
    orphans: Dict[str, List[str]] = field(default_factory=dict)
    missing: Dict[str, List[str]] = field(default_factory=dict)
    missing_session_samples: List[str] = field(default_factory=list)

    def format(self) -> str:
        """Human-readable summary for the command line."""
        lines = ["=== Data Validation Summary ==="]
        for kind, count in self.file_counts.items():
            lines.append(f"{kind.capitalize()} files: {count}")

        lines.append("")
        lines.append("-- Orphans (exist in dataset but missing client file) --")
        for kind, file_numbers in self.orphans.items():
            lines.append(f"From {kind}: {len(file_numbers)}")
            lines.append(f"Examples: {', '.join(file_numbers[:SAMPLE_SIZE])}")

        lines.append("")
        lines.append("-- Missing datasets for known client files --")
        for kind, file_numbers in self.missing.items():
            lines.append(f"Clients without {kind}: {len(file_numbers)}")

        lines.append("")
        lines.append("-- Sample clients missing sessions --")
        lines.extend(self.missing_session_samples)
        return "\n".join(lines)


def _display_name(record: NormalizedRecord) -> str:
    names = extract_client_names(record)
    return names[0] if names else NO_NAME


class DataValidationJob:
    """Build a ``ValidationReport`` from any record repository."""

    def __init__(self, repository: RecordRepository):
        self.repository = repository

    async def run(self) -> ValidationReport:
        """Load every kind and compare file number sets.

        Raises:
            DataSourceError: If any dataset cannot be loaded
        """
        records = {kind: await self.repository.load(kind) for kind in RecordKind}
        ordered: Dict[RecordKind, List[str]] = {
            kind: collect_file_numbers(rows) for kind, rows in records.items()
        }
        file_sets: Dict[RecordKind, Set[str]] = {
            kind: set(file_numbers) for kind, file_numbers in ordered.items()
        }

        client_files = file_sets[RecordKind.CLIENT]
        client_index: Dict[str, NormalizedRecord] = {}
        for record in records[RecordKind.CLIENT]:
            file_number = normalize_file_number(record.get("file_number"))
            if file_number:
                client_index.setdefault(file_number, record)

        report = ValidationReport()
        for kind in RecordKind:
            report.file_counts[kind.collection_name] = len(file_sets[kind])

        for kind in (RecordKind.COUNSELOR, RecordKind.SESSION, RecordKind.INTAKE):
            report.orphans[kind.collection_name] = [
                f for f in ordered[kind] if f not in client_files
            ]

        for kind in (RecordKind.INTAKE, RecordKind.COUNSELOR, RecordKind.SESSION):
            report.missing[kind.collection_name] = [
                f for f in ordered[RecordKind.CLIENT] if f not in file_sets[kind]
            ]

        for file_number in report.missing[RecordKind.SESSION.collection_name][:SAMPLE_SIZE]:
            record = client_index.get(file_number)
            label = _display_name(record) if record is not None else NO_CLIENT
            report.missing_session_samples.append(f"{file_number} - {label}")

        LOGGER.info(
            "Validation finished",
            extra={
                "orphan_counts": {k: len(v) for k, v in report.orphans.items()},
                "missing_counts": {k: len(v) for k, v in report.missing.items()},
            },
        )
        return report
