#!/usr/bin/env python3
"""
Entry point for the MFlix Movies API.
Loads settings, builds the application and runs uvicorn programmatically.
"""
import logging
import sys

import uvicorn

from mflix_api.core.config import ConfigurationError, get_settings
from mflix_api.server import create_app

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout,
    )


def main() -> None:
    """Main entry point for the application"""
    configure_logging()
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.critical(f"CRITICAL ERROR: Failed to load application settings: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.LOG_LEVEL)
    app = create_app(settings)

    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")
    # lifespan="on" makes a failed MongoDB ping abort startup with a non-zero exit
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        lifespan="on",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
