"""Custom exception hierarchy."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(AppError):
    """Raised when a query or file number is missing or malformed."""
    pass


class DataSourceError(AppError):
    """Raised when a row source cannot be read or the document store is unreachable."""
    pass


class CaseFileNotFoundError(AppError):
    """Raised when a file number has no records in any source."""

    def __init__(self, file_number: str):
        super().__init__(f"File {file_number} not found")
        self.file_number = file_number
