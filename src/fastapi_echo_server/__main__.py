"""Run the echo service: ``python -m fastapi_echo_server``.

Settings come from ECHO_* environment variables (see config.Settings).
"""

import logging
import sys

import uvicorn

from fastapi_echo_server.config import Settings, configure_logging
from fastapi_echo_server.exceptions import ConfigurationError
from fastapi_echo_server.fastapi.app import create_app

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        app = create_app(settings)
    except ConfigurationError as exc:
        print(f"fastapi-echo-server: {exc}", file=sys.stderr)
        return 2

    logger.info(
        "Starting echo server",
        extra={"host": settings.host, "port": settings.port},
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
