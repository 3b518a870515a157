"""CORS decision engine.

Single source of truth for cross-origin header emission. Normal responses and
preflight answers go through the same origin decision, so a browser's cached
preflight grant always agrees with what the real response carries.

Rules:
  1. No ``Origin`` request header means no ``Access-Control-Allow-Origin``.
  2. Origins are compared by exact string equality.
  3. ``Vary: Origin`` is added whenever the allowed origin is not ``*``.
  4. Headers already present on a response are never overwritten, except the
     credentials and expose headers which always reflect the policy.
"""

from collections.abc import Mapping

from starlette import status
from starlette.responses import Response, StreamingResponse
from structlog import get_logger

from edge_ipinfo.core.responses import error_response, error_response_for
from edge_ipinfo.core.validators import parse_comma_separated
from edge_ipinfo.cors.headers import (
    ALLOW_CREDENTIALS,
    ALLOW_HEADERS,
    ALLOW_METHODS,
    ALLOW_ORIGIN,
    EXPOSE_HEADERS,
    MAX_AGE,
    REQUEST_HEADERS,
    REQUEST_METHOD,
    VARY,
    append_vary,
    copy_headers,
    set_if_absent,
)
from edge_ipinfo.cors.policy import (
    WILDCARD,
    AllowlistOrigins,
    AnyOrigin,
    CORSPolicy,
    FixedOrigin,
    ReflectOrigin,
)
from edge_ipinfo.exceptions import CORSHeaderNotAllowedError, ErrorCode


logger = get_logger(__name__)


class CORSEngine:
    """Computes allow-origin decisions and builds preflight responses."""

    def __init__(self, policy: CORSPolicy) -> None:
        self.policy = policy

    def resolve_allowed_origin(self, request_headers: Mapping[str, str]) -> str | None:
        """Decide the ``Access-Control-Allow-Origin`` value for a request.

        Args:
            request_headers: Case-insensitive request headers

        Returns:
            ``"*"``, the matched origin, or None when nothing should be emitted
        """
        origin = request_headers.get("origin")
        if not origin:
            return None

        match self.policy.origin:
            case AnyOrigin():
                return WILDCARD
            case ReflectOrigin():
                return origin
            case FixedOrigin(origin=fixed):
                return fixed if origin == fixed else None
            case AllowlistOrigins(origins=allowed):
                return origin if origin in allowed else None
        return None

    def apply(self, request_headers: Mapping[str, str], response: Response) -> Response:
        """Return a copy of ``response`` carrying the CORS headers.

        The input response's headers are left untouched. Applying twice with
        the same request gives the same header set as applying once.
        """
        allowed = self.resolve_allowed_origin(request_headers)
        headers = copy_headers(response.headers)

        if allowed is not None:
            set_if_absent(headers, ALLOW_ORIGIN, allowed)
            if allowed != WILDCARD:
                if self.policy.allow_credentials:
                    headers[ALLOW_CREDENTIALS] = "true"
                append_vary(headers, "Origin")

        # Informational even for rejected origins so tooling can see why.
        set_if_absent(headers, ALLOW_METHODS, self.policy.methods_value)
        set_if_absent(headers, ALLOW_HEADERS, self.policy.headers_value)

        expose = self.policy.expose_value
        if expose:
            headers[EXPOSE_HEADERS] = expose

        return _rebuild(response, headers.raw)

    def build_preflight_response(self, request_headers: Mapping[str, str]) -> Response:
        """Answer a CORS preflight (OPTIONS) request.

        A disallowed requested method yields a plain 405 JSON error and a
        disallowed requested header a plain 400 JSON error, neither carrying
        CORS headers. Otherwise the answer is a bodiless 204. A missing
        ``Origin`` is not an error; the answer simply has no allow-origin.
        """
        allowed = self.resolve_allowed_origin(request_headers)

        requested_method = request_headers.get(REQUEST_METHOD.lower())
        if requested_method and not self.policy.allows_method(requested_method.upper()):
            logger.debug(
                "preflight_method_rejected",
                requested_method=requested_method,
            )
            return error_response(
                status.HTTP_405_METHOD_NOT_ALLOWED,
                ErrorCode.METHOD_NOT_ALLOWED,
                f"Method {requested_method} not allowed",
            )

        headers: dict[str, str] = {}
        if allowed is not None:
            headers[ALLOW_ORIGIN] = allowed
        headers[ALLOW_METHODS] = self.policy.methods_value

        raw_requested = request_headers.get(REQUEST_HEADERS.lower())
        if raw_requested:
            requested = parse_comma_separated(raw_requested)
            for header in requested:
                if not self.policy.allows_header(header):
                    logger.debug("preflight_header_rejected", header=header)
                    return error_response_for(CORSHeaderNotAllowedError(header))
            # Narrow the cached grant to what was asked for.
            headers[ALLOW_HEADERS] = ", ".join(requested)
        else:
            headers[ALLOW_HEADERS] = self.policy.headers_value

        headers[MAX_AGE] = self.policy.max_age_value

        if allowed is not None and allowed != WILDCARD:
            if self.policy.allow_credentials:
                headers[ALLOW_CREDENTIALS] = "true"

        expose = self.policy.expose_value
        if expose:
            headers[EXPOSE_HEADERS] = expose

        if allowed is not None and allowed != WILDCARD:
            headers[VARY] = "Origin"

        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)


def _rebuild(response: Response, raw_headers: list[tuple[bytes, bytes]]) -> Response:
    """Clone status, body and background of ``response`` with new headers."""
    body_iterator = getattr(response, "body_iterator", None)
    clone: Response
    if body_iterator is not None:
        clone = StreamingResponse(
            body_iterator,
            status_code=response.status_code,
            background=response.background,
        )
    else:
        clone = Response(
            content=response.body,
            status_code=response.status_code,
            background=response.background,
        )
    clone.raw_headers = raw_headers
    return clone
