"""Response builders shared by routes, the dispatcher and the CORS engine.

Success bodies are the raw payload with no wrapper object. Error bodies are
``{"code": ..., "message": ..., **extra}``.
"""

from types import MappingProxyType
from typing import Any

import orjson
from starlette import status
from starlette.responses import Response

from edge_ipinfo.exceptions import EdgeInfoError, ErrorCode


JSON_HEADERS = MappingProxyType(
    {
        "content-type": "application/json;charset=UTF-8",
        "cache-control": "no-store",
        "x-content-type-options": "nosniff",
    }
)

TEXT_HEADERS = MappingProxyType(
    {
        "content-type": "text/plain; charset=utf-8",
        "cache-control": "no-store",
        "x-content-type-options": "nosniff",
    }
)


def error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    extra: dict[str, Any] | None = None,
) -> Response:
    """Build a standardized JSON error response."""
    body = {"code": str(code), "message": message, **(extra or {})}
    return Response(
        content=orjson.dumps(body),
        status_code=status_code,
        headers=dict(JSON_HEADERS),
    )


def error_response_for(exc: EdgeInfoError) -> Response:
    """Build the JSON error response for a service exception."""
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


def success_response(
    data: Any,
    status_code: int = status.HTTP_200_OK,
    pretty: bool = True,
) -> Response:
    """Build a JSON success response carrying ``data`` as-is."""
    option = orjson.OPT_INDENT_2 if pretty else None
    return Response(
        content=orjson.dumps(data, option=option),
        status_code=status_code,
        headers=dict(JSON_HEADERS),
    )


def json_head_response(status_code: int = status.HTTP_200_OK) -> Response:
    """Bodiless response that still advertises the JSON headers."""
    return Response(status_code=status_code, headers=dict(JSON_HEADERS))


def text_response(
    text: str, status_code: int = status.HTTP_200_OK
) -> Response:
    """Plain text response with caching and sniffing disabled."""
    return Response(
        content=text,
        status_code=status_code,
        headers=dict(TEXT_HEADERS),
    )


def no_content_response(headers: dict[str, str] | None = None) -> Response:
    """Build a 204 response with no body.

    ``cache-control`` and ``x-content-type-options`` are added unless the
    caller already supplied them.
    """
    merged = dict(headers or {})
    lowered = {name.lower() for name in merged}
    if "cache-control" not in lowered:
        merged["cache-control"] = "no-store"
    if "x-content-type-options" not in lowered:
        merged["x-content-type-options"] = "nosniff"
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=merged)
