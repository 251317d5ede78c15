# logrelay/main.py
import logging

import uvicorn

from logrelay.config import Settings
from logrelay.logging_setup import configure_logging
from logrelay.server import create_app

logger = logging.getLogger("logrelay")


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_filter)

    app = create_app(settings)

    logger.info("Starting server at http://%s:%d", settings.host, settings.port)
    logger.info("Logs will be written to: %s", settings.log_path)

    # bind failures propagate and end the process
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
