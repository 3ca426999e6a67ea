"""
Primary FastAPI application factory
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from mflix_api.api.api import api_router
from mflix_api.core.config import Settings, get_settings
from mflix_api.data_access.mongo_client import close_mongo_connection, connect_to_mongo

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    mongo_client: Optional[AsyncIOMotorClient] = None,
    client_factory: Callable[..., Any] = AsyncIOMotorClient,
) -> FastAPI:
    """
    Builds the application.

    When no client is given, one is created and pinged during startup; a failed
    ping raises out of the lifespan and the server never starts accepting requests.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        owns_client = app.state.mongo_client is None
        if owns_client:
            logger.info("Application startup: Initializing MongoDB connection...")
            app.state.mongo_client = await connect_to_mongo(settings, client_factory=client_factory)
        yield
        # Shutdown
        if owns_client:
            logger.info("Application shutdown: Closing MongoDB connection...")
            close_mongo_connection(app.state.mongo_client)
            app.state.mongo_client = None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mongo_client = mongo_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(api_router)

    @app.get("/", status_code=status.HTTP_200_OK)
    async def root():
        """Root endpoint to confirm the API is running."""
        return {"message": "Hello World"}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the service as {"error": "<message>"}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )
