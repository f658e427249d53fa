"""Offline batch jobs."""

from casefile.jobs.data_validation import DataValidationJob, ValidationReport
from casefile.jobs.mongo_migration import (
    MigrationOptions,
    MigrationReport,
    MongoMigrationJob,
    session_id_for,
)

__all__ = [
    "DataValidationJob",
    "MigrationOptions",
    "MigrationReport",
    "MongoMigrationJob",
    "ValidationReport",
    "session_id_for",
]
