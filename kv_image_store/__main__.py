"""Run the service with uvicorn: ``python -m kv_image_store``."""

import logging

from uvicorn import run

from kv_image_store.main import app, settings

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    logger.info(f"Listening on {settings.host}:{settings.port}")
    run(app, host=settings.host, port=settings.port, log_config=None)
