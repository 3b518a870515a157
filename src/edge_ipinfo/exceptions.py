"""Exception hierarchy and error codes for the edge IP info service.

Every error carries the machine-readable ``code`` that ends up in the JSON
error body, plus the HTTP status it maps to. Handlers in
``edge_ipinfo.api.middleware.errors`` turn these into responses.
"""

from enum import StrEnum
from typing import Any

from starlette import status


class ErrorCode(StrEnum):
    """Error codes reported in the ``code`` field of JSON error bodies."""

    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    ENV_PLATFORM_METADATA_MISSING = "ENV_PLATFORM_METADATA_MISSING"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CORS_HEADER_NOT_ALLOWED = "CORS_HEADER_NOT_ALLOWED"


class EdgeInfoError(Exception):
    """Base exception for all service errors.

    Supports HTTP status codes and structured extra fields which are merged
    into the error body next to ``code`` and ``message``.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class MethodNotAllowedError(EdgeInfoError):
    """HTTP method is not in the allowlist (405)."""

    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(
            message,
            code=ErrorCode.METHOD_NOT_ALLOWED,
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        )


class NotFoundError(EdgeInfoError):
    """No route matches the request path (404)."""

    def __init__(self, message: str = "Request path not defined") -> None:
        super().__init__(
            message,
            code=ErrorCode.NOT_FOUND,
            status_code=status.HTTP_404_NOT_FOUND,
        )


class PlatformMetadataMissingError(EdgeInfoError):
    """The hosting platform attached no metadata to the request (500)."""

    def __init__(self, message: str = "Platform metadata unavailable") -> None:
        super().__init__(
            message,
            code=ErrorCode.ENV_PLATFORM_METADATA_MISSING,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class CORSHeaderNotAllowedError(EdgeInfoError):
    """A preflight asked for a request header outside the allowlist (400)."""

    def __init__(self, header: str) -> None:
        super().__init__(
            f"CORS header not allowed: {header}",
            code=ErrorCode.CORS_HEADER_NOT_ALLOWED,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
        self.header = header


class InternalServerError(EdgeInfoError):
    """Generic server failure; never exposes the underlying cause (500)."""

    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(message)


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
