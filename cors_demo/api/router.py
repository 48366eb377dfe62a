"""
cors_demo/api/router.py

Central API router for the CORS demo.

All sub-routers are registered here and this module is imported by
main.py.  Every demo route lives under /api; /health sits at the root and
is not governed by a cross-origin policy.
"""

from fastapi import APIRouter

from cors_demo.api.routes import headers, health, public, restricted, session

# ---------------------------------------------------------------------------
# Root API router
# ---------------------------------------------------------------------------
api_router = APIRouter()

# --- Core ---
api_router.include_router(health.router)                        # GET /health

# --- Cross-origin demo cases ---
api_router.include_router(public.router, prefix="/api")         # GET  /api/public
api_router.include_router(restricted.router, prefix="/api")     # GET  /api/restricted
api_router.include_router(session.router, prefix="/api")        # POST /api/login, GET /api/protected
api_router.include_router(headers.router, prefix="/api")        # POST /api/with-headers
