"""Configuration module for the edge IP info service."""

from edge_ipinfo.exceptions import ConfigurationError

from .cors import CORSSettings
from .metadata import MetadataSettings
from .server import ServerSettings
from .settings import Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "CORSSettings",
    "MetadataSettings",
    "ServerSettings",
    "ConfigurationError",
]
