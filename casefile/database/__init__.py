"""Document store client management."""

from casefile.database.client import MongoClientManager, close_database, mongo_client

__all__ = ["MongoClientManager", "close_database", "mongo_client"]
