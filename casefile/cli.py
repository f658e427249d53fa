"""Command line entry point for the batch jobs.

Usage:
    casefile migrate [--skip-sessions] [--sessions-limit N] [--since YYYY-MM-DD]
                     [--batch-size N] [--dry-run]
    casefile validate [--backend csv|mongo]
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from casefile.config import settings
from casefile.core.exceptions import AppError
from casefile.database.client import MongoClientManager
from casefile.dependencies import Backend, resolve_backend
from casefile.jobs.data_validation import DataValidationJob
from casefile.jobs.mongo_migration import DEFAULT_BATCH_SIZE, MigrationOptions, MongoMigrationJob
from casefile.repositories.base_repository import RecordRepository
from casefile.repositories.csv_repository import CsvRecordRepository
from casefile.repositories.mongo_repository import MongoRecordRepository
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="casefile", description="Case file data jobs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    migrate = subparsers.add_parser("migrate", help="Import the CSV datasets into MongoDB")
    migrate.add_argument("--skip-sessions", action="store_true", help="Do not import session history")
    migrate.add_argument("--sessions-limit", type=int, default=None, help="Stop after N sessions")
    migrate.add_argument("--since", default=None, help="Only sessions on or after YYYY-MM-DD")
    migrate.add_argument("--batch-size", type=int, default=DEFAULT_BATCH_SIZE, help="Session bulk write size")
    migrate.add_argument("--dry-run", action="store_true", help="Read and count without writing")

    validate = subparsers.add_parser("validate", help="Report cross-dataset inconsistencies")
    validate.add_argument("--backend", default=None, help="csv (default) or mongo")

    return parser


async def run_migration(args: argparse.Namespace) -> int:
    client_manager = MongoClientManager(settings.mongo)
    options = MigrationOptions(
        skip_sessions=args.skip_sessions,
        sessions_limit=args.sessions_limit,
        since=args.since,
        batch_size=args.batch_size,
        dry_run=args.dry_run,
    )
    try:
        report = await MongoMigrationJob(client_manager, settings.data, options).run()
    finally:
        await client_manager.close()

    for key, value in report.to_dict().items():
        print(f"{key}: {value}")
    return 0


async def run_validation(args: argparse.Namespace) -> int:
    backend = resolve_backend(body_value=args.backend, env_value=settings.use_mongo)
    client_manager: Optional[MongoClientManager] = None
    repository: RecordRepository
    if backend is Backend.MONGO:
        client_manager = MongoClientManager(settings.mongo)
        repository = MongoRecordRepository(client_manager)
    else:
        repository = CsvRecordRepository(settings.data)

    try:
        report = await DataValidationJob(repository).run()
    finally:
        if client_manager is not None:
            await client_manager.close()

    print(report.format())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    runner = run_migration if args.command == "migrate" else run_validation
    try:
        return asyncio.run(runner(args))
    except AppError as e:
        LOGGER.error(f"{args.command} failed: {e.message}", exc_info=e.original_error or e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
