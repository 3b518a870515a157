"""API middleware for the edge IP info service."""

from edge_ipinfo.api.middleware.cors import CORSEntryMiddleware
from edge_ipinfo.api.middleware.errors import setup_error_handlers
from edge_ipinfo.api.middleware.logging import AccessLogMiddleware
from edge_ipinfo.api.middleware.request_id import RequestIDMiddleware


__all__ = [
    "AccessLogMiddleware",
    "CORSEntryMiddleware",
    "RequestIDMiddleware",
    "setup_error_handlers",
]
