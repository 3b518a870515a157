"""Access logging middleware for structured HTTP request/response logging."""

import time

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from edge_ipinfo.core.validators import UNKNOWN_IP, validate_and_clean_ip


logger = structlog.get_logger(__name__)


def _client_ip(request: Request, header_name: str) -> str:
    """Edge-supplied client IP, falling back to the socket peer."""
    ip = validate_and_clean_ip(request.headers.get(header_name))
    if ip == UNKNOWN_IP and request.client:
        return request.client.host
    return ip


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Emits one ``request_complete`` event per request."""

    def __init__(self, app: ASGIApp, client_ip_header: str):
        super().__init__(app)
        self.client_ip_header = client_ip_header

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_error",
                method=request.method,
                path=request.url.path,
                client_ip=_client_ip(request, self.client_ip_header),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        logger.info(
            "request_complete",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            client_ip=_client_ip(request, self.client_ip_header),
            user_agent=request.headers.get("user-agent", "unknown"),
        )
        return response
