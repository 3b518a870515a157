"""Per-request platform metadata (network and geolocation)."""

from edge_ipinfo.metadata.models import PlatformMetadata
from edge_ipinfo.metadata.providers import (
    CloudflareHeadersProvider,
    MetadataProvider,
    NullMetadataProvider,
    ScopeMetadataProvider,
    create_metadata_provider,
)


__all__ = [
    "PlatformMetadata",
    "MetadataProvider",
    "CloudflareHeadersProvider",
    "ScopeMetadataProvider",
    "NullMetadataProvider",
    "create_metadata_provider",
]
