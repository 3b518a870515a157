"""Platform metadata providers.

A provider turns an incoming request into ``PlatformMetadata``, or None when
the hosting platform attached nothing. Which one is used is a startup
setting; the active instance lives on ``app.state.metadata_provider``.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import ValidationError
from starlette.requests import Request
from structlog import get_logger

from edge_ipinfo.config.metadata import MetadataSettings
from edge_ipinfo.metadata.models import PlatformMetadata


logger = get_logger(__name__)

SCOPE_EXTENSION_KEY = "platform.metadata"

# Cloudflare visitor-location headers → metadata field names
CLOUDFLARE_HEADER_FIELDS = {
    "cf-ipcountry": "country",
    "cf-ipcity": "city",
    "cf-region": "region",
    "cf-region-code": "regionCode",
    "cf-ipcontinent": "continent",
    "cf-iplatitude": "latitude",
    "cf-iplongitude": "longitude",
    "cf-timezone": "timezone",
    "cf-postal-code": "postalCode",
    "cf-metro-code": "metroCode",
}


class MetadataProvider(Protocol):
    async def fetch(self, request: Request) -> PlatformMetadata | None: ...


class CloudflareHeadersProvider:
    """Reads metadata from headers Cloudflare adds when proxying to an origin.

    Requests without a ``cf-ray`` header did not pass through Cloudflare and
    get no metadata.
    """

    async def fetch(self, request: Request) -> PlatformMetadata | None:
        ray = request.headers.get("cf-ray")
        if not ray:
            return None

        data: dict[str, Any] = {
            field: request.headers[header]
            for header, field in CLOUDFLARE_HEADER_FIELDS.items()
            if request.headers.get(header)
        }
        # Ray IDs look like "8a1b2c3d4e5f6789-SJC"; the suffix is the colo
        _, sep, colo = ray.rpartition("-")
        if sep and colo:
            data["colo"] = colo
        accept_encoding = request.headers.get("accept-encoding")
        if accept_encoding:
            data["clientAcceptEncoding"] = accept_encoding
        return PlatformMetadata.model_validate(data)


class ScopeMetadataProvider:
    """Reads a mapping the ASGI server placed in ``scope["extensions"]``."""

    def __init__(self, key: str = SCOPE_EXTENSION_KEY) -> None:
        self.key = key

    async def fetch(self, request: Request) -> PlatformMetadata | None:
        extensions = request.scope.get("extensions") or {}
        raw = extensions.get(self.key)
        if raw is None:
            return None
        if not isinstance(raw, Mapping):
            logger.warning(
                "platform_metadata_invalid",
                key=self.key,
                value_type=type(raw).__name__,
            )
            return None
        try:
            return PlatformMetadata.model_validate(dict(raw))
        except ValidationError as e:
            logger.warning("platform_metadata_invalid", key=self.key, error=str(e))
            return None


class NullMetadataProvider:
    """Provider for deployments without any edge metadata."""

    async def fetch(self, request: Request) -> PlatformMetadata | None:
        return None


def create_metadata_provider(settings: MetadataSettings) -> MetadataProvider:
    """Build the provider selected in settings."""
    if settings.provider == "cloudflare_headers":
        return CloudflareHeadersProvider()
    if settings.provider == "asgi_scope":
        return ScopeMetadataProvider()
    return NullMetadataProvider()
