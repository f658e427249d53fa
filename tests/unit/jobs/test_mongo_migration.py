"""Unit tests for the CSV to MongoDB import job."""

import hashlib

import pytest
from pymongo import TEXT
from pymongo.errors import BulkWriteError

from casefile.core.exceptions import DataSourceError
from casefile.jobs.mongo_migration import MigrationOptions, MongoMigrationJob, session_id_for
from casefile.models.records import RecordKind


class TestSessionId:
    """Test suite for the deterministic session key."""

    def test_hash_of_key_fields(self):
        """Test hash of key fields."""
        record = {"file_number": "1", "session_date": "2024-01-01", "session_fee": "80", "session_note": "hi"}
        expected = hashlib.sha1("1|2024-01-01|||||80|hi".encode("utf-8")).hexdigest()

        assert session_id_for(record) == expected

    def test_stable_for_equal_records(self):
        """Test stable for equal records."""
        record = {"file_number": "1", "session_date": "2024-01-01", "session_status": "Attended"}

        assert session_id_for(record) == session_id_for(dict(record))

    def test_missing_and_empty_fields_hash_alike(self):
        """Test missing and empty fields hash alike."""
        assert session_id_for({"file_number": "1", "payment_method": None}) == session_id_for(
            {"file_number": "1", "payment_method": ""}
        )

    def test_only_note_prefix_counts(self):
        """Test only note prefix counts."""
        base = {"file_number": "1", "session_note": "x" * 64}

        assert session_id_for({**base, "session_note": "x" * 64 + " more"}) == session_id_for(base)
        assert session_id_for({**base, "session_note": "y" + "x" * 63}) != session_id_for(base)

    def test_different_sessions_differ(self):
        """Test different sessions differ."""
        assert session_id_for({"file_number": "1", "session_date": "2024-01-01"}) != session_id_for(
            {"file_number": "1", "session_date": "2024-01-02"}
        )


class TestMongoMigrationJob:
    """Test suite for the CSV to MongoDB import, run against fake collections."""

    @pytest.mark.asyncio
    async def test_full_import(self, fake_mongo_manager, data_settings):
        """Test full import."""
        report = await MongoMigrationJob(fake_mongo_manager, data_settings).run()

        assert report.clients == 3
        assert report.intakes == 2
        assert report.counselors == 3
        assert report.sessions_read == 4
        assert report.sessions_imported == 4
        assert report.sessions_written == 4
        assert not report.dry_run

        sessions = fake_mongo_manager.collection(RecordKind.SESSION)
        assert [len(batch) for batch in sessions.bulk_writes] == [4]
        assert len(fake_mongo_manager.collection(RecordKind.CLIENT).bulk_writes[0]) == 3

    @pytest.mark.asyncio
    async def test_indexes(self, fake_mongo_manager, data_settings):
        """Test indexes."""
        await MongoMigrationJob(fake_mongo_manager, data_settings).run()

        client_indexes = fake_mongo_manager.collection(RecordKind.CLIENT).indexes
        assert client_indexes[0] == ([("file_number", 1)], {"unique": True})
        assert all(direction == TEXT for _, direction in client_indexes[1][0])

        session_indexes = fake_mongo_manager.collection(RecordKind.SESSION).indexes
        assert ([("session_id", 1)], {"unique": True}) in session_indexes

    @pytest.mark.asyncio
    async def test_dry_run_writes_nothing(self, fake_mongo_manager, data_settings):
        """Test dry run writes nothing."""
        options = MigrationOptions(dry_run=True)

        report = await MongoMigrationJob(fake_mongo_manager, data_settings, options).run()

        assert report.dry_run
        assert report.clients == 3
        assert report.sessions_imported == 4
        assert report.sessions_written == 0
        for kind in RecordKind:
            assert fake_mongo_manager.collection(kind).bulk_writes == []
            assert fake_mongo_manager.collection(kind).indexes == []

    @pytest.mark.asyncio
    async def test_sessions_limit_and_batches(self, fake_mongo_manager, data_settings):
        """Test sessions limit and batches."""
        options = MigrationOptions(sessions_limit=2, batch_size=1)

        report = await MongoMigrationJob(fake_mongo_manager, data_settings, options).run()

        assert report.sessions_imported == 2
        assert report.sessions_written == 2
        assert [len(batch) for batch in fake_mongo_manager.collection(RecordKind.SESSION).bulk_writes] == [1, 1]

    @pytest.mark.asyncio
    async def test_since_filters_undated_and_older_sessions(self, fake_mongo_manager, data_settings):
        """Test since filters undated and older sessions."""
        options = MigrationOptions(since="2024-02-01")

        report = await MongoMigrationJob(fake_mongo_manager, data_settings, options).run()

        assert report.sessions_read == 4
        assert report.sessions_imported == 2

    @pytest.mark.asyncio
    async def test_skip_sessions(self, fake_mongo_manager, data_settings):
        """Test skip sessions."""
        report = await MongoMigrationJob(
            fake_mongo_manager, data_settings, MigrationOptions(skip_sessions=True)
        ).run()

        assert report.sessions_read == 0
        assert fake_mongo_manager.collection(RecordKind.SESSION).bulk_writes == []
        assert report.clients == 3

    @pytest.mark.asyncio
    async def test_write_failure_raises_data_source_error(self, fake_mongo_manager, data_settings):
        """Test write failure raises data source error."""
        fake_mongo_manager.collection(RecordKind.INTAKE).fail_with = BulkWriteError({"writeErrors": []})

        with pytest.raises(DataSourceError) as exc_info:
            await MongoMigrationJob(fake_mongo_manager, data_settings).run()

        assert "intakes" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_csv_raises(self, fake_mongo_manager, data_settings, data_dir):
        """Test missing csv raises."""
        (data_dir / "File+Client Name.csv").unlink()

        with pytest.raises(DataSourceError):
            await MongoMigrationJob(fake_mongo_manager, data_settings).run()
