"""
cors_demo/api/routes/public.py

Open endpoint: readable from any origin (`Access-Control-Allow-Origin: *`).
"""

from typing import Any, Dict

from fastapi import APIRouter

router = APIRouter(tags=["Open"])


@router.get("/public", summary="Public data, any origin")
async def public_data() -> Dict[str, Any]:
    """GET /api/public"""
    return {"message": "This is public data accessible from any origin"}
