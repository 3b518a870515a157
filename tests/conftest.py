"""Shared fixtures for edge_ipinfo tests."""

import os
from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request

from edge_ipinfo.api.app import create_app
from edge_ipinfo.config.settings import Settings
from edge_ipinfo.metadata.models import PlatformMetadata


ALLOWED_ORIGIN = "https://example.com"
OTHER_ALLOWED_ORIGIN = "https://example.net"
FOREIGN_ORIGIN = "https://evil.example"


class StaticMetadataProvider:
    """Provider returning the same metadata for every request."""

    def __init__(self, metadata: PlatformMetadata | None) -> None:
        self.metadata = metadata

    async def fetch(self, request: Request) -> PlatformMetadata | None:
        return self.metadata


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep host config files and env vars out of every test."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONFIG_FILE", raising=False)
    for prefix in ("CORS__", "SERVER__", "METADATA__"):
        for key in list(os.environ):
            if key.upper().startswith(prefix):
                monkeypatch.delenv(key)


@pytest.fixture
def sample_metadata() -> PlatformMetadata:
    return PlatformMetadata.model_validate(
        {
            "asn": 13335,
            "asOrganization": "Cloudflare, Inc.",
            "country": "US",
            "region": "California",
            "city": "San Francisco",
            "latitude": "37.78040",
            "longitude": "-122.39070",
            "timezone": "America/Los_Angeles",
            "clientAcceptEncoding": "gzip, br",
            "colo": "SJC",
        }
    )


@pytest.fixture
def make_app() -> Callable[..., FastAPI]:
    """Build an app with the given CORS settings and metadata."""

    def _make(
        metadata: PlatformMetadata | None = None, **cors: Any
    ) -> FastAPI:
        settings = Settings(cors=cors or None, metadata={"provider": "none"})
        app = create_app(settings)
        app.state.metadata_provider = StaticMetadataProvider(metadata)
        return app

    return _make


@pytest.fixture
def client(make_app: Callable[..., FastAPI]) -> TestClient:
    """Client for the default allowlist policy without metadata."""
    return TestClient(make_app())


@pytest.fixture
def metadata_client(
    make_app: Callable[..., FastAPI], sample_metadata: PlatformMetadata
) -> TestClient:
    return TestClient(make_app(metadata=sample_metadata))
