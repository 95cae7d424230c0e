"""Run the task list API with uvicorn."""

import logging

import uvicorn

from tasklist.config import get_settings
from tasklist.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    logger.info("Serving task list on http://%s:%d", settings.host, settings.port)
    uvicorn.run("tasklist.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
