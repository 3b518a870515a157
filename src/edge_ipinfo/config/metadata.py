"""Platform metadata provider settings."""

from typing import Literal

from pydantic import BaseModel, Field


class MetadataSettings(BaseModel):
    """Where per-request network/geolocation metadata comes from."""

    provider: Literal["cloudflare_headers", "asgi_scope", "none"] = Field(
        default="cloudflare_headers",
        description=(
            "cloudflare_headers: Cloudflare visitor-location headers; "
            "asgi_scope: mapping injected by the ASGI server; none: disabled"
        ),
    )

    client_ip_header: str = Field(
        default="CF-Connecting-IP",
        min_length=1,
        description="Request header carrying the client address set by the edge",
    )
