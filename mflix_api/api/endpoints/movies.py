# mflix_api/api/endpoints/movies.py

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from mflix_api.api.deps import get_app_settings, get_movie_service
from mflix_api.core.config import Settings
from mflix_api.services.movie_service import InvalidMovieIdError, MovieNotFoundError, MovieService

logger = logging.getLogger(__name__)
router = APIRouter()


def error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


@router.get(
    "",  # GET /movies
    summary="List Movies",
    description="Retrieve every movie in the collection. No pagination is applied.",
)
async def list_movies(movie_service: MovieService = Depends(get_movie_service)):
    try:
        movies = await movie_service.list_movies()
        return JSONResponse(status_code=status.HTTP_200_OK, content=movies)
    except Exception as e:
        logger.error(f"Error listing movies: {e}", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)


@router.post(
    "/aggregations",  # POST /movies/aggregations
    summary="Run Aggregation",
    description="Run the aggregation pipeline given in the request body against the movies collection.",
)
async def aggregate_movies(
    request: Request,
    movie_service: MovieService = Depends(get_movie_service),
):
    """
    The body is any JSON value and is handed to the database unchanged;
    the server is left to reject pipelines it cannot run.
    """
    body = await request.body()
    try:
        pipeline = json.loads(body)
    except ValueError as e:
        logger.warning(f"Rejected aggregation body that is not valid JSON: {e}")
        return error_response(status.HTTP_400_BAD_REQUEST, e)

    try:
        result = await movie_service.aggregate_movies(pipeline)
        return JSONResponse(status_code=status.HTTP_200_OK, content=result)
    except Exception as e:
        logger.error(f"Error running aggregation: {e}", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)


@router.get(
    "/{movie_id}",  # GET /movies/{movie_id}
    summary="Get Movie Details",
    description="Retrieve a single movie by its 24-character hex ObjectId.",
    responses={
        400: {"description": "Malformed movie id"},
        500: {"description": "Movie not found or database error"},
    },
)
async def get_movie(
    movie_id: str,
    movie_service: MovieService = Depends(get_movie_service),
    settings: Settings = Depends(get_app_settings),
):
    try:
        movie = await movie_service.get_movie_by_id(movie_id)
        return JSONResponse(status_code=status.HTTP_200_OK, content=movie)
    except InvalidMovieIdError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, e)
    except MovieNotFoundError as e:
        # Not-found shares the backend error status unless explicitly told apart
        if settings.DISTINGUISH_NOT_FOUND:
            return error_response(status.HTTP_404_NOT_FOUND, e)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)
    except Exception as e:
        logger.error(f"Error getting movie {movie_id}: {e}", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)
