"""Route handlers for the edge IP info service."""

from edge_ipinfo.api.routes.all_json import all_json
from edge_ipinfo.api.routes.echo import cf_json, headers, health
from edge_ipinfo.api.routes.home import home


__all__ = [
    "all_json",
    "cf_json",
    "headers",
    "health",
    "home",
]
