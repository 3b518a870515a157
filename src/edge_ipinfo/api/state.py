"""Accessors for objects stored on ``app.state`` at startup."""

from fastapi import Request

from edge_ipinfo.config.settings import Settings
from edge_ipinfo.cors.engine import CORSEngine
from edge_ipinfo.metadata.providers import MetadataProvider


def get_settings_from_request(request: Request) -> Settings:
    return request.app.state.settings


def get_cors_engine(request: Request) -> CORSEngine:
    return request.app.state.cors_engine


def get_metadata_provider(request: Request) -> MetadataProvider:
    return request.app.state.metadata_provider
