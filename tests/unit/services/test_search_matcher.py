"""Unit tests for the search matcher."""

from casefile.models.records import RecordKind
from casefile.services.search.search_matcher import (
    SEARCH_FIELDS,
    collect_file_numbers,
    filter_by_file_number,
    is_file_number_query,
    search,
)


class TestSearch:
    """Test suite for case-insensitive substring search."""

    def test_case_insensitive_substring(self):
        """Test case insensitive substring."""
        doe = {"file_number": "1", "client1_last_name": "Doe"}
        roe = {"file_number": "2", "client1_last_name": "Roe"}

        assert search([doe, roe], "doe", ["client1_last_name"]) == [doe]

    def test_query_is_trimmed_and_lowercased(self):
        """Test query is trimmed and lowercased."""
        record = {"file_number": "1", "client1_first_name": "  Jane "}
        assert search([record], "  JAN ", ["client1_first_name"]) == [record]

    def test_any_field_may_match(self):
        """Test any field may match."""
        record = {"file_number": "1", "counselor_last_name": "Ruiz"}
        assert search([record], "ruiz", SEARCH_FIELDS[RecordKind.COUNSELOR]) == [record]

    def test_falls_back_to_case_insensitive_key(self):
        """Test falls back to case insensitive key."""
        record = {"FILE_NUMBER": "77", "Client1 Last Name": "Doe"}
        assert search([record], "77", ["file_number"]) == [record]

    def test_absent_fields_never_match(self):
        """Test absent fields never match."""
        assert search([{"file_number": "1"}], "x", ["file_name"]) == []

    def test_source_order_is_kept(self):
        """Test source order is kept."""
        records = [{"file_number": str(n), "file_name": "SMITH"} for n in (3, 1, 2)]
        assert search(records, "smith", ["file_name"]) == records

    def test_non_string_values_are_stringified(self):
        """Test non string values are stringified."""
        record = {"file_number": 1234}
        assert search([record], "23", ["file_number"]) == [record]


class TestFileNumberHelpers:
    """Test suite for file number filtering and collection."""

    def test_is_file_number_query(self):
        """Test is file number query."""
        assert is_file_number_query("123")
        assert is_file_number_query(" 0042 ")
        assert not is_file_number_query("12a")
        assert not is_file_number_query("doe")
        assert not is_file_number_query("")

    def test_filter_is_exact(self):
        """Test filter is exact."""
        records = [{"file_number": "123"}, {"file_number": "1234567"}, {"file_number": "0123"}]
        assert filter_by_file_number(records, " 123 ") == [{"file_number": "123"}]

    def test_collect_file_numbers_dedupes_in_order(self):
        """Test collect file numbers dedupes in order."""
        matches = [
            {"file_number": "5"},
            {"file_number": "3"},
            {"file_number": "5"},
            {"file_number": ""},
            {"city": "no number"},
        ]
        assert collect_file_numbers(matches) == ["5", "3"]
