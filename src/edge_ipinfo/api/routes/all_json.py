"""``/all.json``: client IP plus network and geolocation metadata."""

import math
from typing import Any

from fastapi import Request
from pydantic import BaseModel
from starlette.datastructures import Headers
from starlette.responses import Response
from structlog import get_logger

from edge_ipinfo.api.state import get_metadata_provider, get_settings_from_request
from edge_ipinfo.core.responses import json_head_response, success_response
from edge_ipinfo.core.validators import validate_and_clean_ip
from edge_ipinfo.exceptions import (
    InternalServerError,
    MethodNotAllowedError,
    PlatformMetadataMissingError,
)
from edge_ipinfo.metadata.models import PlatformMetadata


logger = get_logger(__name__)

MAX_USER_AGENT_LENGTH = 512
NOT_AVAILABLE = "N/A"
READ_METHODS = ("GET", "HEAD")


class IPInfo(BaseModel):
    """Body of a successful ``GET /all.json``."""

    ip: str
    asn: str
    as_org: Any
    country: Any
    region: Any
    city: Any
    latitude: Any
    longitude: Any
    timezone: Any
    encoding: Any
    user_agent: str


def format_asn(value: Any) -> str:
    """``AS<n>`` for a positive finite whole number, else ``N/A``."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return NOT_AVAILABLE
    if not math.isfinite(value) or value <= 0 or value != int(value):
        return NOT_AVAILABLE
    return f"AS{int(value)}"


def truncate_user_agent(user_agent: str | None) -> str:
    if not user_agent:
        return NOT_AVAILABLE
    if len(user_agent) > MAX_USER_AGENT_LENGTH:
        return f"{user_agent[:MAX_USER_AGENT_LENGTH]}…"
    return user_agent


def build_ip_info(
    headers: Headers, metadata: PlatformMetadata, client_ip_header: str
) -> IPInfo:
    return IPInfo(
        ip=validate_and_clean_ip(headers.get(client_ip_header)),
        asn=format_asn(metadata.asn),
        as_org=metadata.as_organization or NOT_AVAILABLE,
        country=metadata.country or NOT_AVAILABLE,
        region=metadata.region or NOT_AVAILABLE,
        city=metadata.city or NOT_AVAILABLE,
        latitude=metadata.latitude or NOT_AVAILABLE,
        longitude=metadata.longitude or NOT_AVAILABLE,
        timezone=metadata.timezone or NOT_AVAILABLE,
        encoding=metadata.client_accept_encoding or NOT_AVAILABLE,
        user_agent=truncate_user_agent(headers.get("user-agent")),
    )


async def all_json(request: Request) -> Response:
    if request.method not in READ_METHODS:
        raise MethodNotAllowedError()

    metadata = await get_metadata_provider(request).fetch(request)
    if metadata is None:
        raise PlatformMetadataMissingError()

    # HEAD only confirms availability; skip IP and user agent handling
    if request.method == "HEAD":
        return json_head_response()

    settings = get_settings_from_request(request)
    try:
        info = build_ip_info(
            request.headers, metadata, settings.metadata.client_ip_header
        )
    except Exception:
        logger.exception("ip_info_build_failed", path=request.url.path)
        raise InternalServerError() from None

    return success_response(info.model_dump())
