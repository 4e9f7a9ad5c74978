"""Request tracing and HTTP metrics middleware"""

import uuid
import time
from typing import Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.routing import Match
from drive_decision.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"


def _route_template(routes, scope: dict, prefix: str = "") -> Optional[str]:
    for route in routes:
        match, child_scope = route.matches(scope)
        if match != Match.FULL:
            continue

        # Routes and mounts carry "path"; a nested router carries "prefix"
        path = prefix + (getattr(route, "path", None) or getattr(route, "prefix", ""))
        sub_routes = getattr(route, "routes", None)
        if sub_routes is None:
            return path

        # Mounted app or router: keep descending with its prefix
        template = _route_template(sub_routes, {**scope, **child_scope}, path)
        if template is not None:
            return template
    return None


def endpoint_label(request: Request) -> str:
    """
    Full route template (/v1/decision/{decision_id}) so stored IDs don't
    become label values. Unmatched requests fall back to the raw path.

    Must run before the request is dispatched; routing rewrites the scope.
    """
    template = _route_template(request.app.router.routes, dict(request.scope))
    return template if template is not None else request.url.path


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it on the response"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Observe request latency per method, route and status"""

    async def dispatch(self, request: Request, call_next):
        endpoint = endpoint_label(request)
        start_time = time.perf_counter()
        response = await call_next(request)

        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(time.perf_counter() - start_time)

        return response
