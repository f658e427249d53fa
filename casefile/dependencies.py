"""Centralized dependency injection for FastAPI application.

Backend selection and repository construction live here. The CSV repository
is a process-wide singleton so its record cache survives across requests.
"""

from enum import Enum
from functools import lru_cache
from typing import Any, Optional

from casefile.config import settings
from casefile.database.client import mongo_client
from casefile.repositories.base_repository import RecordRepository
from casefile.repositories.csv_repository import CsvRecordRepository
from casefile.repositories.mongo_repository import MongoRecordRepository
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)

BACKEND_HEADER = "X-Backend"

MONGO_SELECTORS = {"mongo", "mongodb", "true", "1"}


class Backend(str, Enum):
    """Storage backends a request can be served from."""

    CSV = "csv"
    MONGO = "mongo"


def _preference(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def resolve_backend(
    header_value: Any = None,
    body_value: Any = None,
    env_value: Any = None,
) -> Backend:
    """Pick the backend with precedence header > body > environment.

    ``mongo``, ``mongodb``, ``true`` and ``1`` select MongoDB; any other
    value selects CSV. Absent or blank values defer to the next source.

    Args:
        header_value: Value of the ``X-Backend`` request header
        body_value: ``backend`` field of the request body
        env_value: Environment default (``USE_MONGO``)

    Returns:
        Backend: Selected backend
    """
    for value in (header_value, body_value, env_value):
        preference = _preference(value)
        if preference is not None:
            return Backend.MONGO if preference.lower() in MONGO_SELECTORS else Backend.CSV
    return Backend.CSV


@lru_cache(maxsize=1)
def get_csv_repository() -> CsvRecordRepository:
    """Shared CSV repository."""
    return CsvRecordRepository(settings.data)


def get_mongo_repository() -> MongoRecordRepository:
    """MongoDB repository over the shared client."""
    return MongoRecordRepository(mongo_client)


class RepositorySelector:
    """Hands out the repository for a resolved backend."""

    def __init__(
        self,
        csv_repository: RecordRepository,
        mongo_repository: RecordRepository,
        env_default: Optional[str] = None,
    ):
        self.csv_repository = csv_repository
        self.mongo_repository = mongo_repository
        self.env_default = env_default

    def select(self, header_value: Any = None, body_value: Any = None) -> RecordRepository:
        backend = resolve_backend(header_value, body_value, self.env_default)
        LOGGER.debug("Resolved backend", extra={"backend": backend.value})
        if backend is Backend.MONGO:
            return self.mongo_repository
        return self.csv_repository


def get_repository_selector() -> RepositorySelector:
    """Get repository selector instance.

    Returns:
        RepositorySelector: Selector over the CSV and MongoDB repositories
    """
    return RepositorySelector(
        csv_repository=get_csv_repository(),
        mongo_repository=get_mongo_repository(),
        env_default=settings.use_mongo,
    )
