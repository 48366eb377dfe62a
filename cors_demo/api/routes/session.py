"""
cors_demo/api/routes/session.py

Credentialed endpoints: a demo login that sets a cookie and a protected
endpoint that requires it.

Both routes are governed by an exact-origin policy with credentials
enabled, which is what lets a browser store the cookie from a cross-origin
response and send it back.  The token is a placeholder; there is no user
store and no password check.

Endpoints:
    POST /api/login      : set the session cookie
    GET  /api/protected  : 401 without the cookie, secret payload with it
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from cors_demo.app.config import Settings
from cors_demo.app.dependencies import get_config, require_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Credentials"])


class LoginIn(BaseModel):
    """Request body for the demo login."""
    username: str = Field(..., examples=["testuser"])


@router.post("/login", summary="Set a demo session cookie")
async def login(
    body:     LoginIn,
    response: Response,
    config:   Settings = Depends(get_config),
) -> Dict[str, Any]:
    """
    Issue a placeholder session token as a cookie.

    The cookie is HttpOnly, SameSite=None and Secure: SameSite=None is what
    allows it on cross-site requests, and browsers only accept that together
    with Secure.
    """
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=secrets.token_urlsafe(16),
        httponly=True,
        samesite="none",
        secure=True,
    )
    logger.info("[session] demo login for %r", body.username)
    return {"message": f"Logged in as {body.username}"}


@router.get("/protected", summary="Data that requires the session cookie")
async def protected_data(_session: str = Depends(require_session)) -> Dict[str, Any]:
    """GET /api/protected, 401 when the session cookie is absent."""
    return {
        "message": "This is protected data",
        "secret":  "You have accessed protected content!",
    }
