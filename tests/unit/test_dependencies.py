"""Unit tests for backend selection."""

from unittest.mock import MagicMock

import pytest

from casefile.dependencies import Backend, RepositorySelector, resolve_backend


class TestResolveBackend:
    """Test suite for backend precedence and selector values."""

    @pytest.mark.parametrize("value", ["mongo", "MongoDB", "true", "1", " TRUE ", True])
    def test_mongo_selectors(self, value):
        """Test mongo selectors."""
        assert resolve_backend(header_value=value) is Backend.MONGO

    @pytest.mark.parametrize("value", ["csv", "false", "0", "postgres", False])
    def test_other_values_select_csv(self, value):
        """Test other values select csv."""
        assert resolve_backend(header_value=value, env_value="true") is Backend.CSV

    def test_header_beats_body(self):
        """Test header beats body."""
        assert resolve_backend("csv", "mongo", "mongo") is Backend.CSV
        assert resolve_backend("mongo", "csv", "false") is Backend.MONGO

    def test_body_beats_environment(self):
        """Test body beats environment."""
        assert resolve_backend(None, "mongo", "false") is Backend.MONGO
        assert resolve_backend(None, "csv", "true") is Backend.CSV

    @pytest.mark.parametrize("value", [True, 1])
    def test_non_string_body_values(self, value):
        """Test JSON literals from the request body select MongoDB."""
        assert resolve_backend(None, value, "false") is Backend.MONGO
        assert resolve_backend(None, False, "true") is Backend.CSV

    def test_blank_values_defer(self):
        """Test blank values defer."""
        assert resolve_backend("", "  ", "true") is Backend.MONGO
        assert resolve_backend(None, None, "") is Backend.CSV

    def test_defaults_to_csv(self):
        """Test defaults to csv."""
        assert resolve_backend() is Backend.CSV


class TestRepositorySelector:
    """Test suite for handing out the repository of the resolved backend."""

    def test_select(self):
        """Test select."""
        csv_repository, mongo_repository = MagicMock(), MagicMock()
        selector = RepositorySelector(csv_repository, mongo_repository, env_default="1")

        assert selector.select() is mongo_repository
        assert selector.select(body_value="csv") is csv_repository
        assert selector.select("mongodb", "csv") is mongo_repository
