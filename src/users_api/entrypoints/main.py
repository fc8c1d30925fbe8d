"""
Process entry point for one service instance.

Usage:
    users-api

Or with uvicorn directly:
    uvicorn users_api.entrypoints.api:create_app --factory --host 0.0.0.0 --port 8000
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv
from pydantic import ValidationError

from users_api.entrypoints.api import create_app
from users_api.services.config import get_settings
from users_api.services.log import configure_logging

logger = logging.getLogger("users_api.main")


def main() -> int:
    load_dotenv()
    try:
        settings = get_settings()
    except ValidationError as error:
        configure_logging()
        logger.critical("invalid configuration, refusing to start: %s", error)
        return 1

    configure_logging(settings.USERS_API_LOG_LEVEL)
    logger.info("starting users API on %s:%s", settings.USERS_API_HOST, settings.USERS_API_PORT)
    uvicorn.run(
        create_app(settings),
        host=settings.USERS_API_HOST,
        port=settings.USERS_API_PORT,
        log_level=settings.USERS_API_LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
