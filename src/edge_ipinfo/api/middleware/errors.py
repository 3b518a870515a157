"""Error handling for the edge IP info service.

Translates ``EdgeInfoError`` subclasses, framework HTTP errors and anything
unhandled into the standard ``{"code", "message"}`` JSON error body.
"""

from fastapi import FastAPI, Request
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from structlog import get_logger

from edge_ipinfo.core.responses import error_response, error_response_for
from edge_ipinfo.exceptions import (
    EdgeInfoError,
    ErrorCode,
    InternalServerError,
    MethodNotAllowedError,
    NotFoundError,
)


logger = get_logger(__name__)


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application."""

    @app.exception_handler(EdgeInfoError)
    async def edge_info_error_handler(request: Request, exc: EdgeInfoError) -> Response:
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            type(exc).__name__,
            error_code=str(exc.code),
            error_message=exc.message,
            status_code=exc.status_code,
            request_method=request.method,
            request_url=request.url.path,
        )
        return error_response_for(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            logger.debug("HTTP 404", request_url=request.url.path)
            return error_response_for(NotFoundError())
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return error_response_for(MethodNotAllowedError())

        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            error_message=exc.detail,
            request_method=request.method,
            request_url=request.url.path,
        )
        return error_response(
            exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR, str(exc.detail)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> Response:
        logger.error(
            "Unhandled exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            request_method=request.method,
            request_url=request.url.path,
            exc_info=True,
        )
        return error_response_for(InternalServerError())
