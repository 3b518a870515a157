"""Validation utilities for configuration values and header-supplied input."""

import re


__all__ = [
    "UNKNOWN_IP",
    "parse_comma_separated",
    "validate_and_clean_ip",
]


UNKNOWN_IP = "Unknown"

# Shape check only: octets are not range-checked, so 999.999.999.999 passes.
_IPV4_PATTERN = re.compile(r"(?:\d{1,3}\.){3}\d{1,3}", re.ASCII)
# Hex digits and colons; compressed forms allowed, no canonical validation.
_IPV6_PATTERN = re.compile(r"[0-9a-f:]+", re.IGNORECASE)


def parse_comma_separated(
    value: str | list[str] | tuple[str, ...],
    strip: bool = True,
    filter_empty: bool = True,
) -> list[str]:
    """Parse comma-separated string into list of values.

    Used for config values that may be provided as comma-separated strings
    or lists, and for list-valued request headers such as
    ``Access-Control-Request-Headers``.

    Args:
        value: Comma-separated string or list
        strip: Whether to strip whitespace from each item
        filter_empty: Whether to filter out empty strings

    Returns:
        List of parsed values
    """
    items = list(value) if isinstance(value, list | tuple) else value.split(",")

    if strip:
        items = [item.strip() for item in items]

    if filter_empty:
        items = [item for item in items if item]

    return items


def validate_and_clean_ip(raw: str | None) -> str:
    """Validate and clean an IP address taken from a request header.

    Surrounding whitespace and any CR/LF characters are removed before
    matching, so ``"::1\\r\\n"`` becomes ``"::1"``. The IPv4 check is a digit
    shape check and accepts out-of-range octets. IPv6 candidates must contain
    at least one colon so a bare hex string is not mistaken for an address.

    Args:
        raw: Raw header value, possibly empty or None

    Returns:
        The cleaned address, or ``UNKNOWN_IP`` when it does not look like one
    """
    if not raw:
        return UNKNOWN_IP

    cleaned = raw.strip().replace("\r", "").replace("\n", "")

    if _IPV4_PATTERN.fullmatch(cleaned):
        return cleaned
    if ":" in cleaned and _IPV6_PATTERN.fullmatch(cleaned):
        return cleaned
    return UNKNOWN_IP
