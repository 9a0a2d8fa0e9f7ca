from __future__ import annotations

import ipaddress
import logging
import time
import uuid
from collections.abc import Sequence

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from sumapi.core.constants import REQUEST_ID_HEADER
from sumapi.core.errors import InternalServerError
from sumapi.core.logging import log_context
from sumapi.core.metrics import HTTPMetrics
from sumapi.schemas.errors import build_error_response

logger = logging.getLogger(__name__)


Network = ipaddress.IPv4Network | ipaddress.IPv6Network

# Endpoint label for requests no route matched; keeps label cardinality bounded.
UNMATCHED_ENDPOINT = "unmatched"


def parse_networks(trusted_proxies: Sequence[str]) -> list[Network]:
    """Parse TRUSTED_PROXIES once at startup; invalid entries are logged and skipped."""

    networks: list[Network] = []
    for entry in trusted_proxies:
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            logger.warning("ignoring invalid trusted proxy entry", extra={"entry": entry})
    return networks


def _is_trusted(host: str, networks: Sequence[Network]) -> bool:
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return any(address in network for network in networks)


def client_ip(request: Request, trusted_networks: Sequence[Network]) -> str:
    """Resolve the caller address, honouring X-Forwarded-For only from trusted proxies."""

    remote = request.client.host if request.client else ""
    if not remote or not _is_trusted(remote, trusted_networks):
        return remote

    forwarded_for = request.headers.get("x-forwarded-for") or ""
    hops = [hop.strip() for hop in forwarded_for.split(",") if hop.strip()]
    # Walk right to left; the first untrusted hop is the real client.
    for hop in reversed(hops):
        if not _is_trusted(hop, trusted_networks):
            return hop
    if hops:
        return hops[0]
    return (request.headers.get("x-real-ip") or "").strip() or remote


def _request_size(request: Request) -> int:
    size = len(str(request.url)) + len(request.method)
    size += len(f"HTTP/{request.scope.get('http_version', '1.1')}")
    for name, value in request.headers.items():
        size += len(name) + len(value)
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        size += int(content_length)
    return size


def _route_pattern(request: Request) -> str:
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or UNMATCHED_ENDPOINT


async def recover_faults(request: Request, call_next: RequestResponseEndpoint) -> Response:
    try:
        return await call_next(request)
    except Exception as exc:
        request_id = getattr(request.state, "request_id", "")
        logger.exception(
            "panic recovered: %s",
            exc,
            extra={
                "component": "recovery_middleware",
                "operation": "panic_recovery",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": client_ip(request, request.app.state.trusted_networks),
                "user_agent": request.headers.get("user-agent", ""),
                "error_type": type(exc).__name__,
            },
        )
        error = build_error_response(
            "internal server error",
            InternalServerError.code,
            request.url.path,
            request_id,
        )
        response = JSONResponse(
            status_code=InternalServerError.status_code,
            content=error.model_dump(mode="json", exclude_none=True),
        )
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response


async def log_requests(request: Request, call_next: RequestResponseEndpoint) -> Response:
    start = time.perf_counter()
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id

    with log_context(request_id=request_id):
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %s %.2fms",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
            extra={
                "component": "http",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "latency_ms": round(latency_ms, 3),
                "client_ip": client_ip(request, request.app.state.trusted_networks),
                "user_agent": request.headers.get("user-agent", ""),
            },
        )
        return response


async def observe_metrics(request: Request, call_next: RequestResponseEndpoint) -> Response:
    metrics: HTTPMetrics = request.app.state.metrics
    start = time.perf_counter()
    request_size = _request_size(request)

    with metrics.active_requests.track_inprogress():
        try:
            response = await call_next(request)
        except Exception:
            metrics.observe(
                method=request.method,
                endpoint=_route_pattern(request),
                status_code=InternalServerError.status_code,
                duration_seconds=time.perf_counter() - start,
                request_size=request_size,
                response_size=None,
            )
            raise

        content_length = response.headers.get("content-length")
        metrics.observe(
            method=request.method,
            endpoint=_route_pattern(request),
            status_code=response.status_code,
            duration_seconds=time.perf_counter() - start,
            request_size=request_size,
            response_size=int(content_length) if content_length and content_length.isdigit() else None,
        )
        return response
