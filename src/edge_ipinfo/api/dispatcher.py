"""Exact-path dispatcher and OPTIONS handling.

Paths are matched by exact string equality: no trailing-slash redirects, no
path parameters, no prefixes. Anything else falls through to the 404 handler.
"""

from collections.abc import Sequence

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from edge_ipinfo.api.routes import all_json, cf_json, headers, health, home
from edge_ipinfo.api.state import get_cors_engine
from edge_ipinfo.core.responses import no_content_response
from edge_ipinfo.cors.engine import CORSEngine
from edge_ipinfo.cors.headers import REQUEST_HEADERS, REQUEST_METHOD
from edge_ipinfo.exceptions import MethodNotAllowedError


ROUTES = {
    "/health": health,
    "/": home,
    "/all.json": all_json,
    "/cf.json": cf_json,
    "/headers": headers,
}


def require_allowed_method(request: Request) -> None:
    """Re-check the global method gate once a path has matched.

    Runs as a router dependency, so only after path matching. The entry
    middleware has already rejected these methods for every path.
    """
    if not get_cors_engine(request).policy.allows_method(request.method):
        raise MethodNotAllowedError()


def create_router(methods: Sequence[str]) -> APIRouter:
    """Register every route for each allowed method except OPTIONS.

    OPTIONS never reaches the router; ``handle_options`` answers it.
    """
    routed = [method for method in methods if method != "OPTIONS"]
    router = APIRouter(dependencies=[Depends(require_allowed_method)])
    for path, endpoint in ROUTES.items():
        router.add_api_route(
            path,
            endpoint,
            methods=routed,
            response_model=None,
            include_in_schema=False,
        )
    return router


def is_preflight(request: Request) -> bool:
    """A full CORS preflight carries Origin and both request headers."""
    return all(
        request.headers.get(name) is not None
        for name in ("origin", REQUEST_METHOD, REQUEST_HEADERS)
    )


def handle_options(request: Request, engine: CORSEngine) -> Response:
    """Answer OPTIONS: a negotiated preflight, or a bare 204 with ``Allow``.

    The bare answer deliberately carries no Access-Control headers.
    """
    if is_preflight(request):
        return engine.build_preflight_response(request.headers)
    return no_content_response({"Allow": engine.policy.methods_value})
