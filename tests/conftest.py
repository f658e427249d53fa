"""Pytest configuration and shared fixtures."""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from casefile.config import DataSettings
from casefile.dependencies import RepositorySelector, get_repository_selector
from casefile.main import app
from casefile.models.records import RecordKind
from casefile.repositories.csv_repository import CsvRecordRepository, read_csv_rows
from casefile.repositories.mongo_repository import MongoRecordRepository
from casefile.services.normalization.field_normalizer import normalize_record

CLIENT_CSV = """FILE NUMBER,File Name,Client1 First Name,Client1 Last Name,Client2 First Name,Client2 Last Name,LOCATION DETAIL
125477,"CHEN, JULIA",,,,,Main
1234567,,Jane,Doe,John,,Annex
0042,,Mary,Roe,,,Main
"""

INTAKE_CSV = """FILE NUMBER,DOB,CITY,PHONE
125477,1980-05-01,Springfield,555-0100
1234567,1975-02-02,Shelbyville,
"""

COUNSELOR_CSV = """FILE NUMBER,Counselor First Name,Counselor Last Name,THERAPY TYPE,INTAKE DATE,END DATE,LOCATION,STATUS,LOCATION DETAIL
125477,Ana,Ruiz,Individual,01/15/2024,,Main,Active,Room 2
125477,Ben,Okafor,Family,02/01/2024,06/01/2024,Main,Closed,Room 4
555,Carla,Diaz,Couples,03/01/2024,,Annex,Active,
"""

SESSION_CSV = """File Number,Session Date,Supervision Group,Session Status,Session Payment Status,Payment Method,Session Fee,Session Note
125477,2024-01-20,A,Attended,Paid,Card,80,Intro session
125477,2024-03-02,A,Attended,Paid,Card,80,Follow up
125477,,A,Cancelled,Waived,,0,

555,2024-04-01,B,Attended,Unpaid,Cash,60,Orphan session
"""


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Write the four sample CSV datasets.

    Returns:
        Path: Directory holding the CSV files
    """
    (tmp_path / "File+Client Name.csv").write_text(CLIENT_CSV, encoding="utf-8")
    (tmp_path / "Intake Form.csv").write_text(INTAKE_CSV, encoding="utf-8")
    (tmp_path / "Client+Counselor Assignment.csv").write_text(COUNSELOR_CSV, encoding="utf-8")
    (tmp_path / "Session History.csv").write_text(SESSION_CSV, encoding="utf-8")
    return tmp_path


@pytest.fixture
def data_settings(data_dir: Path) -> DataSettings:
    return DataSettings(DATA_DIR=str(data_dir))


@pytest.fixture
def csv_repository(data_settings: DataSettings) -> CsvRecordRepository:
    return CsvRecordRepository(data_settings)


class FakeCursor:
    """Async cursor over an in-memory result list."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self.documents = documents

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return list(self.documents if length is None else self.documents[:length])


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(document, sub) for sub in condition):
                return False
        elif isinstance(condition, dict) and "$regex" in condition:
            value = document.get(key)
            if not isinstance(value, str) or not re.search(condition["$regex"], value, re.IGNORECASE):
                return False
        elif document.get(key) != condition:
            return False
    return True


class FakeCollection:
    """Subset of the async collection API used by the repository and jobs."""

    def __init__(self, documents: Optional[List[Dict[str, Any]]] = None):
        self.documents = [dict(doc, _id=i) for i, doc in enumerate(documents or [])]
        self.bulk_writes: List[List[Any]] = []
        self.indexes: List[Any] = []
        self.fail_with: Optional[Exception] = None

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        if self.fail_with is not None:
            raise self.fail_with
        return FakeCursor([doc for doc in self.documents if _matches(doc, query)])

    async def count_documents(self, query: Dict[str, Any]) -> int:
        return len([doc for doc in self.documents if _matches(doc, query)])

    async def bulk_write(self, operations: List[Any], ordered: bool = True) -> Any:
        if self.fail_with is not None:
            raise self.fail_with
        self.bulk_writes.append(list(operations))

        class Result:
            upserted_count = len(operations)
            modified_count = 0

        return Result()

    async def create_index(self, keys: Any, **options: Any) -> str:
        self.indexes.append((keys, options))
        return "index"


class FakeMongoClientManager:
    """Stands in for ``MongoClientManager`` with one fake collection per kind."""

    def __init__(self, collections: Optional[Dict[RecordKind, FakeCollection]] = None):
        self.collections = collections or {kind: FakeCollection() for kind in RecordKind}
        self.closed = False

    def collection(self, kind: RecordKind) -> FakeCollection:
        return self.collections[kind]

    async def health_check(self) -> Dict[str, Any]:
        return {"status": "healthy", "connected": True, "database": "test"}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def mongo_collections(data_settings: DataSettings) -> Dict[RecordKind, FakeCollection]:
    """Fake collections holding the sample CSV data as migrated documents."""
    repository = CsvRecordRepository(data_settings)
    collections = {}
    for kind in RecordKind:
        path = repository.cache.path_for(kind)
        collections[kind] = FakeCollection([normalize_record(row) for row in read_csv_rows(path)])
    return collections


@pytest.fixture
def fake_mongo_manager() -> FakeMongoClientManager:
    """Client manager over empty fake collections."""
    return FakeMongoClientManager()


@pytest.fixture
def mongo_repository(mongo_collections: Dict[RecordKind, FakeCollection]) -> MongoRecordRepository:
    return MongoRecordRepository(FakeMongoClientManager(mongo_collections))


@pytest.fixture
def test_client(
    csv_repository: CsvRecordRepository, mongo_repository: MongoRecordRepository
) -> TestClient:
    """FastAPI test client wired to the sample data.

    Returns:
        TestClient: FastAPI test client instance
    """
    selector = RepositorySelector(csv_repository, mongo_repository, env_default="")
    app.dependency_overrides[get_repository_selector] = lambda: selector
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}
