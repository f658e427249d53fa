from abc import ABC, abstractmethod
from typing import Any, Optional

from casefile.core.exceptions import AppError
from casefile.repositories.base_repository import RecordRepository
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseService(ABC):
    """Validate-then-run template shared by the search and lookup services.

    Application errors pass through untouched so the API can map them to a
    status code. Anything else is logged with its traceback and surfaces as
    a generic ``AppError``.
    """

    def __init__(self, repository: Optional[RecordRepository] = None):
        self.repository = repository
        self.logger = LOGGER

    async def execute(self, *args, **kwargs) -> Any:
        """Validate the input, then run against the repository.

        Raises:
            ValidationError: If the query or file number is missing
            DataSourceError: If the backend cannot be read
            AppError: For any other failure
        """
        try:
            self.validate(*args, **kwargs)

            return await self.run(*args, **kwargs)

        except AppError:
            raise

        except Exception as e:
            self.logger.error(
                f"Service execution failed: {str(e)}",
                exc_info=True,
                extra={"service": self.__class__.__name__, "backend": getattr(self.repository, "name", None)},
            )
            raise AppError("Error processing request", original_error=e) from e

    def validate(self, *args, **kwargs) -> None:
        """Reject input before any backend access."""

    @abstractmethod
    async def run(self, *args, **kwargs) -> Any:
        """Search or aggregate against ``self.repository``."""
