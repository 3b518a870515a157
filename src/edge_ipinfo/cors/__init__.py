"""Cross-origin policy and decision engine."""

from edge_ipinfo.cors.engine import CORSEngine
from edge_ipinfo.cors.policy import (
    AllowlistOrigins,
    AnyOrigin,
    CORSPolicy,
    FixedOrigin,
    OriginPolicy,
    ReflectOrigin,
    parse_origin_policy,
)


__all__ = [
    "CORSEngine",
    "CORSPolicy",
    "OriginPolicy",
    "AnyOrigin",
    "ReflectOrigin",
    "FixedOrigin",
    "AllowlistOrigins",
    "parse_origin_policy",
]
