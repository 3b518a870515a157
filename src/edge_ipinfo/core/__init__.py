"""Core helpers shared by the API, configuration and CLI layers."""

from edge_ipinfo.core.validators import (
    UNKNOWN_IP,
    parse_comma_separated,
    validate_and_clean_ip,
)


__all__ = [
    "UNKNOWN_IP",
    "parse_comma_separated",
    "validate_and_clean_ip",
]
