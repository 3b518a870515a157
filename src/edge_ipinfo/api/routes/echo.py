"""Echo routes: health, raw platform metadata and request headers."""

from fastapi import Request
from starlette.responses import Response

from edge_ipinfo.api.state import get_metadata_provider
from edge_ipinfo.core.responses import success_response


async def health(request: Request) -> Response:
    return success_response({"msg": "Server up and running"})


async def cf_json(request: Request) -> Response:
    """Raw platform metadata object, or ``{}`` when there is none."""
    metadata = await get_metadata_provider(request).fetch(request)
    return success_response(metadata.to_raw() if metadata is not None else {})


async def headers(request: Request) -> Response:
    """Request headers as a mapping; repeated headers are joined with ", "."""
    echoed = {
        name: ", ".join(request.headers.getlist(name))
        for name in request.headers.keys()
    }
    return success_response(echoed)
