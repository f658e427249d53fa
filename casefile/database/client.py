"""MongoDB client management."""

from typing import Any, Dict, Optional

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from casefile.config import MongoSettings, settings
from casefile.models.records import RecordKind
from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)


class MongoClientManager:
    """Lazily connected MongoDB client shared across requests.

    Connection pooling and concurrency are left to the driver.
    """

    def __init__(self, mongo_settings: MongoSettings, client: Optional[Any] = None):
        """Initialize the client manager.

        Args:
            mongo_settings: Connection URI, database name and timeouts
            client: Pre-built client, mainly for tests
        """
        self.mongo_settings = mongo_settings
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            LOGGER.info(
                "Creating MongoDB client",
                extra={"db_name": self.mongo_settings.db_name},
            )
            self._client = AsyncMongoClient(
                self.mongo_settings.uri,
                serverSelectionTimeoutMS=self.mongo_settings.server_selection_timeout_ms,
            )
        return self._client

    @property
    def database(self) -> Any:
        return self.client[self.mongo_settings.db_name]

    def collection(self, kind: RecordKind) -> Any:
        return self.database[kind.collection_name]

    async def close(self) -> None:
        """Close the client if one was created."""
        if self._client is None:
            return
        try:
            await self._client.close()
            LOGGER.info("MongoDB connection closed")
        except PyMongoError as e:
            LOGGER.error(
                "Error closing MongoDB connection",
                exc_info=True,
                extra={"error": str(e)},
            )
        finally:
            self._client = None

    async def health_check(self) -> Dict[str, Any]:
        """Ping the server."""
        try:
            await self.client.admin.command("ping")
            return {
                "status": "healthy",
                "connected": True,
                "database": self.mongo_settings.db_name,
            }
        except PyMongoError as e:
            LOGGER.warning(f"MongoDB health check failed: {e}")
            return {
                "status": "unhealthy",
                "connected": False,
                "database": self.mongo_settings.db_name,
                "error": "MongoDB unreachable",
            }


mongo_client = MongoClientManager(settings.mongo)


async def close_database() -> None:
    """Close the shared MongoDB client."""
    await mongo_client.close()
