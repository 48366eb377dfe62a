"""
cors_demo/app/dependencies.py

Shared FastAPI dependency functions.

Settings are attached to `app.state` by create_app(),
so routes read the values the running application was built with rather
than module-level globals.
"""

from fastapi import Depends, Request

from cors_demo.app.config import Settings
from cors_demo.app.errors import Unauthorized


# ---------------------------------------------------------------------------
# Configuration dependency
# ---------------------------------------------------------------------------

def get_config(request: Request) -> Settings:
    """
    FastAPI dependency that yields the application's Settings instance.

    Usage:
        @router.get("/some-route")
        async def some_route(config: Settings = Depends(get_config)):
            return {"app": config.APP_NAME}
    """
    return request.app.state.settings


# ---------------------------------------------------------------------------
# Demo session dependency
# ---------------------------------------------------------------------------

def require_session(request: Request, config: Settings = Depends(get_config)) -> str:
    """
    Return the demo session token from its cookie.

    The token is opaque and is not checked against any store; only its
    presence matters.

    Raises:
        Unauthorized: when the cookie is absent.
    """
    token = request.cookies.get(config.SESSION_COOKIE_NAME)
    if not token:
        raise Unauthorized()
    return token
