"""HTTP API for the edge IP info service."""

from edge_ipinfo.api.app import create_app, get_app


__all__ = ["create_app", "get_app"]
