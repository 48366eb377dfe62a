"""
cors_demo/app/cors.py

Cross-origin policy table for the demo API.

Centralises every route's policy so the differences between the five demo
cases can be read side by side.  The table is built once from Settings in
create_app() and handed to RoutePolicyMiddleware.

Note: a request that carries no Origin header at all (curl, server-to-server
code, this repo's own TestClient calls) is allowed by every policy below,
including the exact-origin and credentialed ones.  That mirrors what browsers
do, since only a browser sends Origin and only a browser enforces the answer,
but it also means these policies are not an access-control mechanism on
their own.
"""

from typing import List

from cors_demo.app.config import Settings
from cors_demo.policy.models import WILDCARD, PolicyTable, RoutePolicy

# Custom headers used by the /api/with-headers case
CUSTOM_REQUEST_HEADER = "X-Custom-Header"
CUSTOM_RESPONSE_HEADER = "X-Custom-Response-Header"


def get_restricted_origins(settings: Settings) -> List[str]:
    """
    Return the list of origins permitted to call /api/restricted.

    Extend RESTRICTED_ORIGINS in .env when deploying to other environments.
    """
    return list(settings.RESTRICTED_ORIGINS)


def build_policy_table(settings: Settings) -> PolicyTable:
    """
    Build the immutable route → policy table.

    Raises:
        ValueError: if any policy is an invalid combination
            (e.g. wildcard origin with credentials).
    """
    max_age = settings.PREFLIGHT_MAX_AGE
    client_origin = settings.CLIENT_ORIGIN

    return PolicyTable.of(
        # 1. Open: any origin, no credentials
        RoutePolicy(
            path="/api/public",
            origins=WILDCARD,
            allow_methods=("GET",),
            max_age=max_age,
        ),
        # 2. Static allow-list of origins
        RoutePolicy(
            path="/api/restricted",
            origins=tuple(get_restricted_origins(settings)),
            allow_methods=("GET",),
            max_age=max_age,
        ),
        # 3. Credentialed: origin must be exact when cookies are allowed
        RoutePolicy(
            path="/api/login",
            origins=client_origin,
            allow_credentials=True,
            allow_methods=("POST",),
            max_age=max_age,
        ),
        RoutePolicy(
            path="/api/protected",
            origins=client_origin,
            allow_credentials=True,
            allow_methods=("GET",),
            max_age=max_age,
        ),
        # 4. Restricted request / exposed response header sets
        RoutePolicy(
            path="/api/with-headers",
            origins=client_origin,
            allow_methods=("POST",),
            allow_headers=(CUSTOM_REQUEST_HEADER, "Content-Type"),
            expose_headers=(CUSTOM_RESPONSE_HEADER,),
            max_age=max_age,
        ),
    )
