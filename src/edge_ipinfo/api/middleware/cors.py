"""Request entry point: method gate, OPTIONS short-circuit and CORS wrapping."""

from fastapi import Request
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp
from structlog import get_logger

from edge_ipinfo.api.dispatcher import handle_options
from edge_ipinfo.core.responses import error_response_for
from edge_ipinfo.cors.engine import CORSEngine
from edge_ipinfo.exceptions import InternalServerError


logger = get_logger(__name__)


class CORSEntryMiddleware(BaseHTTPMiddleware):
    """Outer gate every request passes through before routing.

    Methods outside the allowlist get a bodiless 405 (still CORS-wrapped).
    OPTIONS is answered here and not wrapped again. Everything else is routed
    and the result wrapped by the CORS engine, including the generic 500 for
    an exception no handler claimed.
    """

    def __init__(self, app: ASGIApp, engine: CORSEngine):
        super().__init__(app)
        self.engine = engine

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.engine.policy.allows_method(request.method):
            logger.debug(
                "method_rejected", method=request.method, path=request.url.path
            )
            rejected = Response(status_code=status.HTTP_405_METHOD_NOT_ALLOWED)
            return self.engine.apply(request.headers, rejected)

        if request.method == "OPTIONS":
            return handle_options(request, self.engine)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "unhandled_exception", method=request.method, path=request.url.path
            )
            response = error_response_for(InternalServerError())
        return self.engine.apply(request.headers, response)
