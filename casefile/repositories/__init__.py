"""Repository layer modules."""

from casefile.repositories.base_repository import RecordRepository
from casefile.repositories.csv_repository import CsvRecordCache, CsvRecordRepository
from casefile.repositories.mongo_repository import MongoRecordRepository

__all__ = [
    "CsvRecordCache",
    "CsvRecordRepository",
    "MongoRecordRepository",
    "RecordRepository",
]
