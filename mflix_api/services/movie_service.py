# mflix_api/services/movie_service.py

import logging
from typing import Any, Dict, List

from bson.errors import InvalidId

from mflix_api.data_access.mongo_client import MovieRepository
from mflix_api.utils.helpers import parse_object_id, to_json_compatible, to_json_list

logger = logging.getLogger(__name__)


class InvalidMovieIdError(ValueError):
    """Raised when a movie id is not a 24-character hex ObjectId."""
    pass


class MovieNotFoundError(Exception):
    """Custom exception when a movie is not found."""

    def __init__(self, message: str = "no documents in result"):
        super().__init__(message)


class MovieService:
    def __init__(self, repository: MovieRepository):
        """
        Initializes the Movie Service.

        Args:
            repository: Repository bound to the movies collection.
        """
        self.repository = repository

    async def list_movies(self) -> List[Any]:
        """
        Retrieves every movie in the collection, unpaginated.

        Returns:
            A list of JSON-safe documents.

        Raises:
            PyMongoError: If a database error occurs.
        """
        docs = await self.repository.find_all()
        logger.info(f"Fetched {len(docs)} movies")
        return to_json_list(docs)

    async def get_movie_by_id(self, movie_id: str) -> Dict[str, Any]:
        """
        Retrieves a single movie by its ObjectId string.

        Args:
            movie_id: The 24-character hex id from the URL.

        Returns:
            The JSON-safe document.

        Raises:
            InvalidMovieIdError: If the id cannot be parsed into an ObjectId.
            MovieNotFoundError: If no document has this id.
            PyMongoError: If a database error occurs.
        """
        try:
            oid = parse_object_id(movie_id)
        except (InvalidId, TypeError) as e:
            logger.warning(f"Attempted to fetch movie with invalid ID format: {movie_id}")
            raise InvalidMovieIdError(str(e)) from e

        movie_doc = await self.repository.find_by_id(oid)
        if movie_doc is None:
            logger.warning(f"Movie with ID {movie_id} not found in database.")
            raise MovieNotFoundError()

        logger.debug(f"Found movie with ID: {movie_id}")
        return to_json_compatible(movie_doc)

    async def aggregate_movies(self, pipeline: Any) -> List[Any]:
        """
        Runs an aggregation pipeline on the movies collection, unchanged.

        Raises:
            PyMongoError: If the pipeline is rejected or fails on the server.
        """
        docs = await self.repository.aggregate(pipeline)
        logger.info(f"Aggregation returned {len(docs)} documents")
        return to_json_list(docs)
