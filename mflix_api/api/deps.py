# FastAPI dependencies (settings, Mongo client, movie service)
# mflix_api/api/deps.py

import logging

from fastapi import Depends, HTTPException, Request, status
from motor.motor_asyncio import AsyncIOMotorClient

from mflix_api.core.config import Settings
from mflix_api.data_access.mongo_client import MovieRepository
from mflix_api.services.movie_service import MovieService

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_mongo_client(request: Request) -> AsyncIOMotorClient:
    """
    FastAPI dependency returning the client created during startup.

    Raises:
        HTTPException 503: If startup never produced a client.
    """
    client = getattr(request.app.state, "mongo_client", None)
    if client is None:
        logger.critical("MongoDB client is not available. Check initialization.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database service not available.",
        )
    return client


def get_movie_repository(
    client: AsyncIOMotorClient = Depends(get_mongo_client),
    settings: Settings = Depends(get_app_settings),
) -> MovieRepository:
    collection = client[settings.DATABASE_NAME][settings.COLLECTION_NAME]
    return MovieRepository(collection)


def get_movie_service(repository: MovieRepository = Depends(get_movie_repository)) -> MovieService:
    return MovieService(repository=repository)
