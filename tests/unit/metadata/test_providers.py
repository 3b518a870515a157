"""Tests for platform metadata providers."""

from typing import Any

import pytest
from starlette.requests import Request

from edge_ipinfo.config.metadata import MetadataSettings
from edge_ipinfo.metadata.models import PlatformMetadata
from edge_ipinfo.metadata.providers import (
    SCOPE_EXTENSION_KEY,
    CloudflareHeadersProvider,
    NullMetadataProvider,
    ScopeMetadataProvider,
    create_metadata_provider,
)


def make_request(
    headers: dict[str, str] | None = None, extensions: dict[str, Any] | None = None
) -> Request:
    scope: dict[str, Any] = {
        "type": "http",
        "method": "GET",
        "path": "/cf.json",
        "query_string": b"",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ],
    }
    if extensions is not None:
        scope["extensions"] = extensions
    return Request(scope)


class TestCloudflareHeadersProvider:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_ray_means_no_metadata(self) -> None:
        request = make_request({"cf-ipcountry": "US"})

        assert await CloudflareHeadersProvider().fetch(request) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reads_location_headers(self) -> None:
        request = make_request(
            {
                "CF-Ray": "8a1b2c3d4e5f6789-SJC",
                "CF-IPCountry": "US",
                "CF-IPCity": "San Jose",
                "CF-Region": "California",
                "CF-IPLatitude": "37.33",
                "CF-IPLongitude": "-121.89",
                "CF-Timezone": "America/Los_Angeles",
                "Accept-Encoding": "gzip, br",
            }
        )

        metadata = await CloudflareHeadersProvider().fetch(request)

        assert metadata is not None
        assert metadata.country == "US"
        assert metadata.city == "San Jose"
        assert metadata.region == "California"
        assert metadata.latitude == "37.33"
        assert metadata.longitude == "-121.89"
        assert metadata.timezone == "America/Los_Angeles"
        assert metadata.colo == "SJC"
        assert metadata.client_accept_encoding == "gzip, br"
        assert metadata.asn is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_ray_without_colo(self) -> None:
        metadata = await CloudflareHeadersProvider().fetch(
            make_request({"cf-ray": "8a1b2c3d4e5f6789"})
        )

        assert metadata is not None
        assert metadata.colo is None
        assert metadata.to_raw() == {}


class TestScopeMetadataProvider:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reads_extension_mapping(self) -> None:
        request = make_request(
            extensions={
                SCOPE_EXTENSION_KEY: {
                    "asn": 13335,
                    "asOrganization": "Cloudflare, Inc.",
                    "botManagement": {"score": 99},
                }
            }
        )

        metadata = await ScopeMetadataProvider().fetch(request)

        assert metadata is not None
        assert metadata.asn == 13335
        assert metadata.as_organization == "Cloudflare, Inc."
        assert metadata.to_raw() == {
            "asn": 13335,
            "asOrganization": "Cloudflare, Inc.",
            "botManagement": {"score": 99},
        }

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_extension(self) -> None:
        assert await ScopeMetadataProvider().fetch(make_request()) is None
        assert await ScopeMetadataProvider().fetch(make_request(extensions={})) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_value_is_ignored(self) -> None:
        request = make_request(extensions={SCOPE_EXTENSION_KEY: "not a mapping"})

        assert await ScopeMetadataProvider().fetch(request) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_numeric_fields_are_kept(self) -> None:
        raw = {"asn": 13335, "latitude": 37.78, "longitude": -122.39, "metroCode": 807}
        request = make_request(extensions={SCOPE_EXTENSION_KEY: raw})

        metadata = await ScopeMetadataProvider().fetch(request)

        assert metadata is not None
        assert metadata.latitude == 37.78
        assert metadata.metro_code == 807
        assert metadata.to_raw() == raw


@pytest.mark.unit
@pytest.mark.asyncio
async def test_null_provider() -> None:
    assert await NullMetadataProvider().fetch(make_request({"cf-ray": "x-SJC"})) is None


@pytest.mark.parametrize(
    ("provider", "expected"),
    [
        ("cloudflare_headers", CloudflareHeadersProvider),
        ("asgi_scope", ScopeMetadataProvider),
        ("none", NullMetadataProvider),
    ],
)
def test_create_metadata_provider(provider: str, expected: type) -> None:
    assert isinstance(
        create_metadata_provider(MetadataSettings(provider=provider)), expected
    )


def test_metadata_keeps_platform_aliases() -> None:
    metadata = PlatformMetadata(as_organization="Example", client_accept_encoding="br")

    assert metadata.to_raw() == {"asOrganization": "Example", "clientAcceptEncoding": "br"}
