"""HTTP transport: route resolution and the retrying request client."""

from .request import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY, RequestClient, error_from_response
from .routes import Route, RouteResolver, route_params

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_RETRY_DELAY",
    "RequestClient",
    "Route",
    "RouteResolver",
    "error_from_response",
    "route_params",
]
