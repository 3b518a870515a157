"""Platform metadata attached to a request by the hosting edge."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlatformMetadata(BaseModel):
    """Network and geolocation data for the connecting client.

    Field aliases follow the edge platform's camelCase object so the raw
    value can be echoed unchanged. Values keep the type the platform sent
    (coordinates and codes may be numbers). Unknown fields are kept.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    asn: Any = Field(default=None, description="Autonomous system number")
    as_organization: Any = Field(
        default=None,
        alias="asOrganization",
        description="Organization owning the ASN",
    )
    country: Any = Field(default=None, description="ISO 3166-1 country code")
    region: Any = Field(default=None, description="Region or state name")
    region_code: Any = Field(default=None, alias="regionCode")
    city: Any = Field(default=None)
    postal_code: Any = Field(default=None, alias="postalCode")
    metro_code: Any = Field(default=None, alias="metroCode")
    continent: Any = Field(default=None)
    latitude: Any = Field(default=None)
    longitude: Any = Field(default=None)
    timezone: Any = Field(default=None, description="IANA timezone name")
    colo: Any = Field(default=None, description="Edge data center code")
    client_accept_encoding: Any = Field(
        default=None,
        alias="clientAcceptEncoding",
        description="Accept-Encoding as sent by the client to the edge",
    )

    def to_raw(self) -> dict[str, Any]:
        """Return the platform-shaped mapping with unset fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)
