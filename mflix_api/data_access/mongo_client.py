# MongoDB connection and repository logic
# mflix_api/data_access/mongo_client.py

import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote_plus

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from mflix_api.core.config import Settings

logger = logging.getLogger(__name__)

SERVER_API_VERSION = "1"


class DatabaseConnectionError(Exception):
    """Raised when the client cannot be created or the startup ping fails."""
    pass


# --- Connection ---

def build_mongo_uri(settings: Settings) -> str:
    """Composes the Atlas SRV connection URI from the configured credentials."""
    user = quote_plus(settings.USERNAME)
    password = quote_plus(settings.PASSWORD.get_secret_value())
    return f"mongodb+srv://{user}:{password}@{settings.CLUSTER}/?retryWrites=true&w=majority"


def redact_uri(uri: str) -> str:
    """Hides the credentials part of a connection URI for logging."""
    scheme, sep, rest = uri.partition("://")
    if not sep or "@" not in rest:
        return uri
    return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"


async def connect_to_mongo(
    settings: Settings,
    client_factory: Callable[..., Any] = AsyncIOMotorClient,
) -> AsyncIOMotorClient:
    """
    Creates the shared client and verifies it with a ping.

    Nothing is retried: the first failure is reported to the caller, which
    decides whether to abort startup.

    Args:
        settings: Loaded application settings.
        client_factory: Callable building the client (AsyncIOMotorClient by default).

    Returns:
        The connected client.

    Raises:
        DatabaseConnectionError: If the client cannot be created or the ping fails.
    """
    uri = build_mongo_uri(settings)
    logger.info(f"Attempting to connect to MongoDB: {redact_uri(uri)}")

    client_options: Dict[str, Any] = {
        "server_api": ServerApi(SERVER_API_VERSION),
        "serverSelectionTimeoutMS": settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
    }
    if settings.MONGODB_TIMEOUT_MS is not None:
        client_options["timeoutMS"] = settings.MONGODB_TIMEOUT_MS

    try:
        client = client_factory(uri, **client_options)
    except Exception as e:
        logger.critical(f"Could not create MongoDB client: {e}", exc_info=True)
        raise DatabaseConnectionError(f"Could not create MongoDB client: {e}") from e

    try:
        await client.admin.command("ping")
    except Exception as e:
        logger.critical(f"MongoDB ping failed: {e}", exc_info=True)
        client.close()
        raise DatabaseConnectionError(f"Could not connect to MongoDB: {e}") from e

    logger.info("MongoDB client initialized successfully.")
    return client


def close_mongo_connection(client: Optional[AsyncIOMotorClient]) -> None:
    if client is not None:
        client.close()
        logger.info("MongoDB client closed.")


# --- Movie Repository ---

class MovieRepository:
    """Raw database operations on the movies collection. Documents are returned untouched."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection
        logger.debug(f"Initialized repository for collection: {collection.name}")

    async def find_all(self) -> List[Dict[str, Any]]:
        """Returns every document in the collection, in cursor order."""
        try:
            cursor = self.collection.find({})
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"DB error listing movies: {e}", exc_info=True)
            raise  # Re-raise for the service layer to handle

    async def find_by_id(self, movie_id: ObjectId) -> Optional[Dict[str, Any]]:
        """Finds a single document by its ObjectId, None if nothing matches."""
        try:
            return await self.collection.find_one({"_id": movie_id})
        except PyMongoError as e:
            logger.error(f"DB error finding movie by ID {movie_id}: {e}", exc_info=True)
            raise

    async def aggregate(self, pipeline: Any) -> List[Dict[str, Any]]:
        """Runs a caller supplied pipeline as-is and drains the result cursor."""
        try:
            cursor = self.collection.aggregate(pipeline)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"DB error running aggregation: {e}", exc_info=True)
            raise
