"""Free-text search over record kinds."""

from casefile.services.search.search_matcher import (
    SEARCH_FIELDS,
    collect_file_numbers,
    filter_by_file_number,
    is_file_number_query,
    search,
)

__all__ = [
    "SEARCH_FIELDS",
    "collect_file_numbers",
    "filter_by_file_number",
    "is_file_number_query",
    "search",
]
