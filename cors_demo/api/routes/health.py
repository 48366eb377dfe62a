"""
cors_demo/api/routes/health.py

Liveness route for the CORS demo server.

Not governed by any cross-origin policy.  Besides confirming the server is
up, it reports which page origin the credentialed routes trust, so a client
that keeps getting 403s can see what it should be loaded from.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from cors_demo.app.config import Settings
from cors_demo.app.dependencies import get_config

router = APIRouter(tags=["Health"])


@router.get("/health", summary="Liveness and trusted client origin")
async def health_check(config: Settings = Depends(get_config)) -> Dict[str, Any]:
    """GET /health"""
    return {
        "status":        "ok",
        "service":       config.APP_NAME,
        "client_origin": config.CLIENT_ORIGIN,
    }
