"""Tests for the route handlers behind the dispatcher."""

import importlib
from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from starlette.types import ASGIApp, Receive, Scope, Send

from edge_ipinfo.api.routes.all_json import (
    MAX_USER_AGENT_LENGTH,
    format_asn,
    truncate_user_agent,
)
from edge_ipinfo.api.routes.home import render_client_ip
from edge_ipinfo.core.responses import JSON_HEADERS
from edge_ipinfo.metadata.models import PlatformMetadata
from edge_ipinfo.metadata.providers import SCOPE_EXTENSION_KEY, ScopeMetadataProvider


all_json_module = importlib.import_module("edge_ipinfo.api.routes.all_json")


def assert_json_headers(response) -> None:
    for name, value in JSON_HEADERS.items():
        assert response.headers[name] == value


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"msg": "Server up and running"}
        assert_json_headers(response)

    def test_post_is_routed(self, client: TestClient) -> None:
        assert client.post("/health").status_code == status.HTTP_200_OK


class TestHome:
    def test_returns_client_ip(self, client: TestClient) -> None:
        response = client.get("/", headers={"CF-Connecting-IP": "203.0.113.7"})

        assert response.status_code == status.HTTP_200_OK
        assert response.text == "203.0.113.7"
        assert response.headers["content-type"] == "text/plain; charset=utf-8"
        assert response.headers["cache-control"] == "no-store"
        assert response.headers["x-content-type-options"] == "nosniff"

    def test_unknown_without_header(self, client: TestClient) -> None:
        assert client.get("/").text == "Unknown"

    def test_malformed_header(self, client: TestClient) -> None:
        assert client.get("/", headers={"CF-Connecting-IP": "nope"}).text == "Unknown"

    def test_missing_request_object(self) -> None:
        response = render_client_ip(None, "CF-Connecting-IP")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR

    def test_configured_header(self, make_app: Callable[..., FastAPI]) -> None:
        app = make_app()
        app.state.settings = app.state.settings.model_copy(
            update={
                "metadata": app.state.settings.metadata.model_copy(
                    update={"client_ip_header": "X-Real-IP"}
                )
            }
        )
        client = TestClient(app)

        response = client.get(
            "/", headers={"X-Real-IP": "2001:db8::7", "CF-Connecting-IP": "1.1.1.1"}
        )

        assert response.text == "2001:db8::7"


class TestAllJson:
    def test_get(self, metadata_client: TestClient) -> None:
        response = metadata_client.get(
            "/all.json",
            headers={"CF-Connecting-IP": "203.0.113.7", "User-Agent": "curl/8.5.0"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert_json_headers(response)
        assert response.json() == {
            "ip": "203.0.113.7",
            "asn": "AS13335",
            "as_org": "Cloudflare, Inc.",
            "country": "US",
            "region": "California",
            "city": "San Francisco",
            "latitude": "37.78040",
            "longitude": "-122.39070",
            "timezone": "America/Los_Angeles",
            "encoding": "gzip, br",
            "user_agent": "curl/8.5.0",
        }

    def test_missing_fields_render_not_available(
        self, make_app: Callable[..., FastAPI]
    ) -> None:
        client = TestClient(make_app(metadata=PlatformMetadata()))

        body = client.get("/all.json").json()

        assert body["ip"] == "Unknown"
        assert body["asn"] == "N/A"
        assert body["country"] == "N/A"
        assert body["encoding"] == "N/A"
        assert body["user_agent"] == "testclient"

    @pytest.mark.parametrize("method", ["GET", "HEAD"])
    def test_missing_metadata(self, client: TestClient, method: str) -> None:
        response = client.request(method, "/all.json")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert_json_headers(response)
        if method == "GET":
            assert response.json()["code"] == "ENV_PLATFORM_METADATA_MISSING"

    def test_head(self, metadata_client: TestClient) -> None:
        response = metadata_client.head(
            "/all.json", headers={"CF-Connecting-IP": "<not an ip>"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.content == b""
        assert_json_headers(response)

    def test_head_skips_ip_processing(
        self, metadata_client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail(*args, **kwargs):
            raise AssertionError("HEAD must not build the body")

        monkeypatch.setattr(all_json_module, "build_ip_info", fail)

        assert metadata_client.head("/all.json").status_code == status.HTTP_200_OK

    @pytest.mark.parametrize("method", ["POST", "PATCH"])
    def test_only_get_and_head(self, metadata_client: TestClient, method: str) -> None:
        response = metadata_client.request(method, "/all.json")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.json()["code"] == "METHOD_NOT_ALLOWED"

    def test_formatting_failure_is_generic(
        self, metadata_client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def boom(*args, **kwargs):
            raise KeyError("secret internal detail")

        monkeypatch.setattr(all_json_module, "build_ip_info", boom)

        response = metadata_client.get("/all.json")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "Internal Server Error",
        }


class TestFormatting:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (13335, "AS13335"),
            (13335.0, "AS13335"),
            (0, "N/A"),
            (-1, "N/A"),
            (float("inf"), "N/A"),
            (float("nan"), "N/A"),
            (1.5, "N/A"),
            (True, "N/A"),
            ("13335", "N/A"),
            (None, "N/A"),
        ],
    )
    def test_format_asn(self, value, expected: str) -> None:
        assert format_asn(value) == expected

    def test_long_user_agent_is_truncated(self) -> None:
        result = truncate_user_agent("a" * (MAX_USER_AGENT_LENGTH + 10))

        assert result == "a" * MAX_USER_AGENT_LENGTH + "…"

    def test_missing_user_agent(self) -> None:
        assert truncate_user_agent(None) == "N/A"


class TestEchoRoutes:
    def test_cf_json(self, metadata_client: TestClient) -> None:
        body = metadata_client.get("/cf.json").json()

        assert body["asn"] == 13335
        assert body["asOrganization"] == "Cloudflare, Inc."
        assert body["colo"] == "SJC"

    def test_cf_json_without_metadata(self, client: TestClient) -> None:
        response = client.get("/cf.json")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {}

    def test_headers(self, client: TestClient) -> None:
        response = client.get("/headers", headers={"X-Custom": "value"})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["x-custom"] == "value"
        assert body["user-agent"] == "testclient"


SCOPE_METADATA = {
    "asn": 13335,
    "country": "US",
    "latitude": 37.78,
    "longitude": -122.39,
    "metroCode": 807,
}


def with_scope_metadata(app: FastAPI, raw: dict[str, Any]) -> ASGIApp:
    """Wrap ``app`` so every HTTP request carries ``raw`` in its extensions."""

    async def wrapped(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            extensions = {**(scope.get("extensions") or {}), SCOPE_EXTENSION_KEY: raw}
            scope = {**scope, "extensions": extensions}
        await app(scope, receive, send)

    return wrapped


class TestScopeMetadata:
    @pytest.fixture
    def scope_client(self, make_app: Callable[..., FastAPI]) -> TestClient:
        app = make_app()
        app.state.metadata_provider = ScopeMetadataProvider()
        return TestClient(with_scope_metadata(app, SCOPE_METADATA))

    def test_numeric_fields_in_all_json(self, scope_client: TestClient) -> None:
        response = scope_client.get("/all.json")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["asn"] == "AS13335"
        assert body["latitude"] == 37.78
        assert body["longitude"] == -122.39
        assert body["region"] == "N/A"

    def test_numeric_fields_in_cf_json(self, scope_client: TestClient) -> None:
        response = scope_client.get("/cf.json")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == SCOPE_METADATA
