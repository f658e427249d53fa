"""Tests for the batch job command line."""

from unittest.mock import patch

import pytest

from casefile import cli
from casefile.config import settings


@pytest.fixture
def sample_settings(monkeypatch, data_settings):
    monkeypatch.setattr(settings, "data", data_settings)
    monkeypatch.setattr(settings, "use_mongo", "")
    return settings


class TestParser:
    """Test suite for the ``casefile`` argument parser."""

    def test_migrate_options(self):
        """Test migrate options."""
        args = cli.build_parser().parse_args(
            ["migrate", "--skip-sessions", "--sessions-limit", "10", "--since", "2024-01-01", "--dry-run"]
        )

        assert args.skip_sessions
        assert args.sessions_limit == 10
        assert args.since == "2024-01-01"
        assert args.batch_size == 2000
        assert args.dry_run

    def test_command_is_required(self):
        """Test command is required."""
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestMain:
    """Test suite for the ``casefile`` entry point and its exit codes."""

    def test_validate_prints_report(self, sample_settings, capsys):
        """Test validate prints report."""
        assert cli.main(["validate"]) == 0

        out = capsys.readouterr().out
        assert "=== Data Validation Summary ===" in out
        assert "Clients without intakes: 1" in out

    def test_migrate_dry_run(self, sample_settings, fake_mongo_manager, capsys):
        """Test migrate dry run."""
        with patch.object(cli, "MongoClientManager", return_value=fake_mongo_manager):
            assert cli.main(["migrate", "--dry-run"]) == 0

        assert "sessions_imported: 4" in capsys.readouterr().out
        assert fake_mongo_manager.closed

    def test_failure_exit_code(self, sample_settings, data_dir):
        """Test failure exit code."""
        (data_dir / "Intake Form.csv").unlink()

        assert cli.main(["validate"]) == 1
