"""
cors_demo/client/browser.py

What a browser does around a cross-origin fetch, for a non-browser client.

`requests` never enforces cross-origin rules, because they are a browser
rule: a script on a page cannot read a response the server did not permit.
These helpers reproduce the checks so the Python client fails the same way
the browser page does:

  - is_simple_request()         → does this request need a preflight?
  - preflight_request_headers() → the OPTIONS request a browser would send
  - check_preflight()           → may the actual request be sent?
  - check_response()            → may the script read the actual response?
  - readable_headers()          → the headers the script can see

Violations raise CORSBlocked with a browser-style message.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from cors_demo.policy.evaluator import parse_header_list
from cors_demo.policy.models import SAFELISTED_REQUEST_HEADERS, SAFELISTED_RESPONSE_HEADERS

SIMPLE_METHODS = frozenset({"GET", "HEAD", "POST"})
SIMPLE_CONTENT_TYPES = frozenset(
    {"application/x-www-form-urlencoded", "multipart/form-data", "text/plain"}
)
# Set by the browser itself, never by page scripts.
_BROWSER_HEADERS = frozenset({"origin", "cookie", "user-agent", "host", "content-length"})


class CORSBlocked(Exception):
    """The browser would refuse to send the request or to expose its response."""


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

def is_simple_request(method: str, headers: Mapping[str, str]) -> bool:
    """True when a browser would send the request without a preflight."""
    if method.upper() not in SIMPLE_METHODS:
        return False
    return not _unsafe_header_names(headers)


def preflight_request_headers(origin: str, method: str, headers: Mapping[str, str]) -> Dict[str, str]:
    """Headers of the OPTIONS request a browser sends before a non-simple request."""
    preflight = {
        "Origin": origin,
        "Access-Control-Request-Method": method.upper(),
    }
    unsafe = _unsafe_header_names(headers)
    if unsafe:
        preflight["Access-Control-Request-Headers"] = ",".join(unsafe)
    return preflight


def _unsafe_header_names(headers: Mapping[str, str]) -> List[str]:
    names = []
    for name, value in headers.items():
        lowered = name.lower()
        if lowered in _BROWSER_HEADERS:
            continue
        if lowered == "content-type":
            if value.split(";")[0].strip().lower() in SIMPLE_CONTENT_TYPES:
                continue
        elif lowered in SAFELISTED_REQUEST_HEADERS:
            continue
        names.append(lowered)
    return sorted(names)


# ---------------------------------------------------------------------------
# Response side
# ---------------------------------------------------------------------------

def check_preflight(
    response:         Any,
    url:              str,
    origin:           str,
    method:           str,
    headers:          Mapping[str, str],
    with_credentials: bool = False,
) -> None:
    """
    Raise CORSBlocked unless the preflight answer permits the actual request.

    Args:
        response: requests/httpx response to the OPTIONS request.
        url (str): Target URL, used in the message.
        origin (str): Origin of the calling page.
        method (str): Method of the actual request.
        headers (Mapping): Headers of the actual request.
        with_credentials (bool): Whether cookies will be sent.
    """
    prefix = f"Access to fetch at '{url}' from origin '{origin}' has been blocked by CORS policy: "
    if not 200 <= response.status_code < 300:
        raise CORSBlocked(
            prefix + "Response to preflight request doesn't pass access control check: "
            "It does not have HTTP ok status."
        )
    _check_allow_origin(
        response,
        origin,
        with_credentials,
        prefix + "Response to preflight request doesn't pass access control check: ",
    )

    method = method.upper()
    allowed_methods = {m.upper() for m in parse_header_list(response.headers.get("access-control-allow-methods"))}
    wildcard = "*" in allowed_methods and not with_credentials
    if method not in SIMPLE_METHODS and method not in allowed_methods and not wildcard:
        raise CORSBlocked(
            prefix + f"Method {method} is not allowed by Access-Control-Allow-Methods in preflight response."
        )

    allowed_headers = set(parse_header_list(response.headers.get("access-control-allow-headers")))
    if "*" in allowed_headers and not with_credentials:
        return
    for name in _unsafe_header_names(headers):
        if name not in allowed_headers:
            raise CORSBlocked(
                prefix + f"Request header field {name} is not allowed by "
                "Access-Control-Allow-Headers in preflight response."
            )


def check_response(response: Any, url: str, origin: str, with_credentials: bool = False) -> None:
    """Raise CORSBlocked unless the calling script may read `response`."""
    prefix = f"Access to fetch at '{url}' from origin '{origin}' has been blocked by CORS policy: "
    _check_allow_origin(response, origin, with_credentials, prefix)


def readable_headers(response_headers: Mapping[str, str], with_credentials: bool = False) -> Dict[str, str]:
    """Lower-cased response headers visible to a page script."""
    exposed = set(parse_header_list(response_headers.get("access-control-expose-headers")))
    expose_all = "*" in exposed and not with_credentials
    visible = {}
    for name, value in response_headers.items():
        lowered = name.lower()
        if expose_all or lowered in SAFELISTED_RESPONSE_HEADERS or lowered in exposed:
            visible[lowered] = value
    return visible


def _check_allow_origin(response: Any, origin: str, with_credentials: bool, prefix: str) -> None:
    allow_origin = response.headers.get("access-control-allow-origin")
    if allow_origin is None:
        raise CORSBlocked(prefix + "No 'Access-Control-Allow-Origin' header is present on the requested resource.")

    if allow_origin == "*":
        if with_credentials:
            raise CORSBlocked(
                prefix + "The value of the 'Access-Control-Allow-Origin' header in the response must "
                "not be the wildcard '*' when the request's credentials mode is 'include'."
            )
    elif allow_origin != origin:
        raise CORSBlocked(
            prefix + f"The 'Access-Control-Allow-Origin' header has a value '{allow_origin}' "
            "that is not equal to the supplied origin."
        )

    allow_credentials = response.headers.get("access-control-allow-credentials") or ""
    if with_credentials and allow_credentials != "true":
        raise CORSBlocked(
            prefix + "The value of the 'Access-Control-Allow-Credentials' header in the response "
            f"is '{allow_credentials}' which must be 'true' when the request's credentials mode is 'include'."
        )
