"""Field name and value normalization."""

from casefile.services.normalization.field_normalizer import (
    FIELD_NAME_MAP,
    normalize_field_name,
    normalize_file_number,
    normalize_record,
    normalize_value,
)

__all__ = [
    "FIELD_NAME_MAP",
    "normalize_field_name",
    "normalize_file_number",
    "normalize_record",
    "normalize_value",
]
