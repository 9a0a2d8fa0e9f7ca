from __future__ import annotations

import argparse
import logging

import uvicorn

from sumapi import __version__
from sumapi.api.app import create_app
from sumapi.core.config import get_settings
from sumapi.core.constants import SERVICE_NAME
from sumapi.core.logging import setup_logging

logger = logging.getLogger("sumapi.main")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=SERVICE_NAME, description="Run the sum API HTTP server.")
    parser.add_argument("--version", action="version", version=f"{SERVICE_NAME} {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    _parse_args(argv)
    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_format=settings.log_format)

    logger.info(
        "Starting %s",
        SERVICE_NAME,
        extra={
            "version": __version__,
            "environment": settings.environment,
            "log_level": settings.log_level,
            "log_format": settings.log_format,
        },
    )

    # uvicorn stops accepting connections on SIGINT/SIGTERM and waits up to
    # timeout_graceful_shutdown for in-flight requests.
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        timeout_keep_alive=settings.keep_alive_timeout,
        timeout_graceful_shutdown=settings.shutdown_timeout,
        # X-Forwarded-For is resolved against TRUSTED_PROXIES by the logging middleware.
        proxy_headers=False,
        log_config=None,
        access_log=False,
    )
    logger.info("%s shutdown completed", SERVICE_NAME)


if __name__ == "__main__":
    main()
