"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

Why one Lambda?
- Keeps the lazily built services warm across routes.
- Simpler to deploy while still keeping code organized by delegating to modules.
"""

from typing import Callable, Dict, Optional, Tuple

from ticksolve.utils.http import json_response

from . import auth, comments, health_check, tickets


def _match(template: str, path: str) -> Optional[Dict[str, str]]:
    """Match "/tickets/{id}"-style templates, returning the path parameters."""
    wanted = template.strip("/").split("/")
    actual = path.strip("/").split("/")
    if len(wanted) != len(actual):
        return None

    params: Dict[str, str] = {}
    for expected, segment in zip(wanted, actual):
        if expected.startswith("{") and expected.endswith("}"):
            if not segment:
                return None
            params[expected[1:-1]] = segment
        elif expected != segment:
            return None
    return params


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event carries the HTTP method and path; we route to the matching
    handler and pass path parameters along when API Gateway did not.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "").upper()
    path = event.get("requestContext", {}).get("http", {}).get("path", "")

    route_table: Tuple[Tuple[str, str, Callable], ...] = (
        ("GET", "/health", health_check.lambda_handler),
        ("POST", "/auth/login", auth.lambda_handler),
        ("GET", "/tickets", tickets.list_handler),
        ("POST", "/tickets", tickets.create_handler),
        ("GET", "/tickets/{id}", tickets.detail_handler),
        ("POST", "/tickets/{id}/comments", comments.lambda_handler),
        ("POST", "/tickets/{id}/status", tickets.status_handler),
    )

    for route_method, template, handler in route_table:
        if route_method != method:
            continue
        params = _match(template, path)
        if params is None:
            continue
        if params and not event.get("pathParameters"):
            event = {**event, "pathParameters": params}
        return handler(event, context)

    return json_response(404, {"message": "Route not found", "route": f"{method} {path}"})
