"""Entry point — starts the Forex Helper API."""

import sys

import uvicorn
from loguru import logger

from forex_helper.config import settings


def configure_logging(level: str | None = None, log_file: str | None = None):
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level or settings.log_level,
    )
    file_path = settings.log_file if log_file is None else log_file
    if file_path:
        logger.add(
            file_path,
            rotation="10 MB",
            retention="7 days",
            level="DEBUG",
        )


def main():
    configure_logging()

    logger.info("=" * 60)
    logger.info("  Forex Helper — position sizing & performance analytics")
    logger.info("=" * 60)
    logger.info(f"API: http://{settings.api_host}:{settings.api_port}")
    logger.info(f"Rates: {settings.rates_api_url or 'static table'}")

    from forex_helper.api.main import create_app

    app = create_app()
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
