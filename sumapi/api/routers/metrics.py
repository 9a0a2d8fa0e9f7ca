"""Prometheus scrape endpoint, mounted at the configured metrics path."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

router = APIRouter(tags=["observability"])


@router.get("", include_in_schema=False)
async def metrics(request: Request) -> Response:
    content, media_type = request.app.state.metrics.exposition()
    return Response(content=content, media_type=media_type)
