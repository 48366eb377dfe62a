"""
cors_demo/api/routes/headers.py

Custom-header endpoint.

A request carrying X-Custom-Header (or a JSON Content-Type) is not "simple",
so the browser preflights it first; only X-Custom-Header and Content-Type
are accepted.  The response sets X-Custom-Response-Header, which the policy
exposes so the calling script can read it.
"""

from typing import Any, Dict

from fastapi import APIRouter, Request, Response

from cors_demo.app.cors import CUSTOM_RESPONSE_HEADER

router = APIRouter(tags=["Custom headers"])


@router.post("/with-headers", summary="Echo received headers, set a custom one")
async def with_headers(request: Request, response: Response) -> Dict[str, Any]:
    """
    POST /api/with-headers

    Returns:
        dict: message plus every request header the server received.
    """
    response.headers[CUSTOM_RESPONSE_HEADER] = "Custom-Value"
    return {
        "message":         "This response includes custom headers",
        "receivedHeaders": dict(request.headers),
    }
