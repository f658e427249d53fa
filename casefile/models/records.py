"""Record kinds and record type aliases shared by row sources and services."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

RawRecord = Mapping[str, Optional[str]]
NormalizedRecord = Dict[str, Any]


class RecordKind(str, Enum):
    """The four related datasets joined on file number."""

    CLIENT = "client"
    INTAKE = "intake"
    COUNSELOR = "counselor"
    SESSION = "session"

    @property
    def collection_name(self) -> str:
        """Document-store collection holding this kind."""
        return {
            RecordKind.CLIENT: "clients",
            RecordKind.INTAKE: "intakes",
            RecordKind.COUNSELOR: "counselors",
            RecordKind.SESSION: "sessions",
        }[self]


@dataclass
class RecordSources:
    """Records of each kind available to one aggregation."""

    clients: List[NormalizedRecord] = field(default_factory=list)
    intakes: List[NormalizedRecord] = field(default_factory=list)
    counselors: List[NormalizedRecord] = field(default_factory=list)
    sessions: List[NormalizedRecord] = field(default_factory=list)
