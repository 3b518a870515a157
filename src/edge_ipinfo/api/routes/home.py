"""Home route: the client's IP address as plain text."""

from fastapi import Request
from starlette import status
from starlette.responses import Response

from edge_ipinfo.api.state import get_settings_from_request
from edge_ipinfo.core.responses import text_response
from edge_ipinfo.core.validators import validate_and_clean_ip


def render_client_ip(request: Request | None, header_name: str) -> Response:
    """Plain-text client IP, or ``Unknown`` when the header is absent or malformed.

    The header is only trustworthy when the edge in front of this service
    overwrites it; elsewhere it can be spoofed, hence the syntax check.
    """
    if request is None:
        return text_response(
            "Request object is missing",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return text_response(validate_and_clean_ip(request.headers.get(header_name)))


async def home(request: Request) -> Response:
    settings = get_settings_from_request(request)
    return render_client_ip(request, settings.metadata.client_ip_header)
