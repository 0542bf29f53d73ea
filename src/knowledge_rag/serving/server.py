"""Process entry point: validate configuration, then serve with uvicorn."""

from __future__ import annotations

import logging
import sys

import uvicorn

from knowledge_rag.config import Settings
from knowledge_rag.errors import ConfigurationError
from knowledge_rag.serving.app import create_app

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Refuse to start when required variables are missing; otherwise serve."""
    settings = Settings()
    configure_logging(settings.log_level)
    try:
        settings.validate_required()
    except ConfigurationError as exc:
        logger.error("Error: %s", exc.message)
        logger.error("Please ensure you have a .env file with all the necessary variables.")
        sys.exit(1)

    app = create_app(settings)
    logger.info("Server is running on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
