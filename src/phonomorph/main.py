"""Main entry point - runs the API server."""

import logging

import uvicorn

from phonomorph.api.app import create_app
from phonomorph.config import get_settings

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Engine echo is enabled in debug; keep SQL out of INFO logs otherwise
    if not debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def main() -> None:
    """Configure logging and serve the API until interrupted."""
    settings = get_settings()
    configure_logging(settings.debug)

    logger.info("Starting Phonomorph...")
    logger.info(f"Environment: {settings.environment}")
    if settings.dry_run:
        logger.warning("DRY_RUN mode - transfers are simulated")

    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
