"""Client name extraction."""

from casefile.services.names.name_extractor import extract_client_names, format_client_names

__all__ = ["extract_client_names", "format_client_names"]
