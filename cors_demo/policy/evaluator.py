"""
cors_demo/policy/evaluator.py

Cross-origin policy evaluation.

Pure functions that turn (RoutePolicy, request facts) into a PolicyDecision.
Nothing here touches Starlette or FastAPI; the middleware feeds in header
values and applies the decision, which keeps the rules easy to test on their
own.

Rules:
  - wildcard policy    → any origin, answered with `*`
  - exact-origin policy → the request Origin must equal the configured one
  - list policy         → the request Origin must be a member
  - no Origin header    → allowed under every policy, no CORS headers added
                          (non-browser caller, nothing to enforce)

Preflights additionally check the requested method and request headers
against the policy before answering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from cors_demo.policy.models import (
    SAFELISTED_REQUEST_HEADERS,
    WILDCARD,
    OriginMode,
    RoutePolicy,
)


ALWAYS_ALLOWED_METHODS = ("OPTIONS",)


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of evaluating one request against one route policy."""

    allowed:   bool
    headers:   Dict[str, str] = field(default_factory=dict)
    reason:    str            = ""
    preflight: bool           = False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def origin_rejection_message(origin: str) -> str:
    return (
        "The CORS policy for this site does not allow access from the "
        f"specified Origin: {origin}"
    )


def is_preflight(method: str, origin: Optional[str], request_method: Optional[str]) -> bool:
    """An OPTIONS request is a preflight only if it names the method it asks about."""
    return method.upper() == "OPTIONS" and bool(origin) and bool(request_method)


def evaluate_request(policy: RoutePolicy, origin: Optional[str]) -> PolicyDecision:
    """
    Decide whether an actual (non-preflight) request may reach the route.

    Args:
        policy (RoutePolicy): Policy of the matched route.
        origin (str | None): Value of the request's Origin header.

    Returns:
        PolicyDecision: allowed + headers to attach, or denied + reason.
    """
    if not origin:
        return PolicyDecision(allowed=True)

    if not policy.allows_origin(origin):
        return PolicyDecision(allowed=False, reason=origin_rejection_message(origin))

    headers = _origin_headers(policy, origin)
    if policy.expose_headers:
        headers["Access-Control-Expose-Headers"] = ", ".join(policy.expose_headers)
    return PolicyDecision(allowed=True, headers=headers)


def evaluate_preflight(
    policy:          RoutePolicy,
    origin:          Optional[str],
    request_method:  str,
    request_headers: Optional[str] = None,
) -> PolicyDecision:
    """
    Answer a preflight (OPTIONS + Access-Control-Request-Method) for a route.

    Args:
        policy (RoutePolicy): Policy of the matched route.
        origin (str | None): Value of the Origin header.
        request_method (str): Value of Access-Control-Request-Method.
        request_headers (str | None): Raw Access-Control-Request-Headers value.

    Returns:
        PolicyDecision: with preflight=True.  Never implies the route runs.
    """
    if origin and not policy.allows_origin(origin):
        return PolicyDecision(
            allowed=False, reason=origin_rejection_message(origin), preflight=True
        )

    method = request_method.strip().upper()
    if method not in policy.allow_methods and method not in ALWAYS_ALLOWED_METHODS:
        return PolicyDecision(
            allowed=False,
            reason=f"Method {method} is not allowed by the CORS policy for {policy.path}",
            preflight=True,
        )

    requested = parse_header_list(request_headers)
    permitted = policy.allowed_header_names
    if permitted is not None:
        for name in requested:
            if name not in permitted and name not in SAFELISTED_REQUEST_HEADERS:
                return PolicyDecision(
                    allowed=False,
                    reason=(
                        f"Request header field {name} is not allowed by the CORS "
                        f"policy for {policy.path}"
                    ),
                    preflight=True,
                )

    headers = _origin_headers(policy, origin) if origin else {}
    headers["Access-Control-Allow-Methods"] = ", ".join(policy.allow_methods)
    if permitted is None:
        # Reflect what was asked for.
        if requested:
            headers["Access-Control-Allow-Headers"] = ", ".join(requested)
        headers["Vary"] = _join_vary(headers.get("Vary"), "Access-Control-Request-Headers")
    elif policy.allow_headers:
        headers["Access-Control-Allow-Headers"] = ", ".join(policy.allow_headers)
    headers["Access-Control-Max-Age"] = str(policy.max_age)
    return PolicyDecision(allowed=True, headers=headers, preflight=True)


def parse_header_list(raw: Optional[str]) -> List[str]:
    """Split a comma-separated header list into lower-cased names."""
    if not raw:
        return []
    return [h.strip().lower() for h in raw.split(",") if h.strip()]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _origin_headers(policy: RoutePolicy, origin: str) -> Dict[str, str]:
    if policy.mode is OriginMode.WILDCARD:
        return {"Access-Control-Allow-Origin": WILDCARD}

    headers = {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    if policy.allow_credentials:
        headers["Access-Control-Allow-Credentials"] = "true"
    return headers


def _join_vary(existing: Optional[str], value: str) -> str:
    return f"{existing}, {value}" if existing else value
