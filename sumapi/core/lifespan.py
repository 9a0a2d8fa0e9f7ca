from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sumapi import __version__
from sumapi.core.constants import SERVICE_NAME

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log service start/stop and publish build info to the metrics registry."""

    settings = app.state.settings
    metrics = getattr(app.state, "metrics", None)
    if metrics is not None:
        metrics.set_app_info(__version__, settings.environment)

    logger.info(
        "Service started",
        extra={
            "service": SERVICE_NAME,
            "version": __version__,
            "environment": settings.environment,
            "host": settings.host,
            "port": settings.port,
        },
    )
    try:
        yield
    finally:
        logger.info("Service stopping", extra={"service": SERVICE_NAME})
