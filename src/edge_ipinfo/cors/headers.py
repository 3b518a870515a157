"""Header merge helpers for CORS responses.

All helpers work on Starlette's case-insensitive ``MutableHeaders`` so they
can be exercised without any HTTP transport.
"""

from starlette.datastructures import MutableHeaders


ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
MAX_AGE = "Access-Control-Max-Age"
REQUEST_METHOD = "Access-Control-Request-Method"
REQUEST_HEADERS = "Access-Control-Request-Headers"
VARY = "Vary"


def copy_headers(headers: MutableHeaders) -> MutableHeaders:
    """Return an independent copy that keeps repeated headers intact."""
    return MutableHeaders(raw=list(headers.raw))


def set_if_absent(headers: MutableHeaders, name: str, value: str) -> bool:
    """Set ``name`` unless a value is already present.

    Returns:
        True if the header was written
    """
    if name in headers:
        return False
    headers[name] = value
    return True


def vary_tokens(value: str | None) -> list[str]:
    """Split a ``Vary`` value into its non-empty tokens."""
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def append_vary(headers: MutableHeaders, token: str) -> None:
    """Add ``token`` to ``Vary``, merging with any existing value.

    Tokens are compared case-insensitively, so calling this twice is a no-op
    the second time. ``Vary: *`` already covers every request header and is
    left alone.
    """
    existing = vary_tokens(", ".join(headers.getlist(VARY)))
    lowered = {item.lower() for item in existing}
    if token.lower() in lowered or "*" in lowered:
        return
    headers[VARY] = ", ".join([*existing, token])
