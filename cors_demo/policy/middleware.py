"""
cors_demo/policy/middleware.py

Per-route cross-origin middleware.

Starlette's CORSMiddleware applies one policy to the whole application and,
for a disallowed simple request, still runs the route and merely omits the
headers.  This middleware instead looks up the policy of the requested path
in a PolicyTable and:

  - answers preflights itself (204 or 403) without calling the route;
  - rejects disallowed origins with 403 before the route runs;
  - attaches the computed Access-Control-* headers to allowed responses.

Paths without a policy pass through untouched.
"""

from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from cors_demo.app.errors import CORSRejected, http_exception_handler
from cors_demo.policy.evaluator import evaluate_preflight, evaluate_request, is_preflight
from cors_demo.policy.models import PolicyTable

logger = logging.getLogger(__name__)


class RoutePolicyMiddleware(BaseHTTPMiddleware):
    """Enforce a PolicyTable on every request whose path it governs."""

    def __init__(self, app: ASGIApp, policies: PolicyTable) -> None:
        super().__init__(app)
        self.policies = policies

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        policy = self.policies.for_path(request.url.path)
        if policy is None:
            return await call_next(request)

        origin = request.headers.get("origin")
        request_method = request.headers.get("access-control-request-method")

        if is_preflight(request.method, origin, request_method):
            decision = evaluate_preflight(
                policy,
                origin,
                request_method,
                request.headers.get("access-control-request-headers"),
            )
            if not decision.allowed:
                logger.warning("[cors] preflight DENIED %s (origin=%s): %s", policy.path, origin, decision.reason)
                return await http_exception_handler(request, CORSRejected(decision.reason))

            logger.debug("[cors] preflight ok %s origin=%s method=%s", policy.path, origin, request_method)
            return Response(status_code=204, headers=decision.headers)

        decision = evaluate_request(policy, origin)
        if not decision.allowed:
            logger.warning("[cors] %s %s DENIED (origin=%s)", request.method, policy.path, origin)
            return await http_exception_handler(request, CORSRejected(decision.reason))

        if origin is None:
            logger.debug("[cors] %s %s without Origin header, allowed", request.method, policy.path)

        response = await call_next(request)
        for name, value in decision.headers.items():
            if name == "Vary" and "vary" in response.headers:
                response.headers["Vary"] = f"{response.headers['vary']}, {value}"
            else:
                response.headers[name] = value
        return response
