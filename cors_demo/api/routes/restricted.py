"""
cors_demo/api/routes/restricted.py

Origin allow-list endpoint.

Only origins listed in RESTRICTED_ORIGINS may read this response; any other
browser origin is answered with 403 before this handler runs.
"""

from typing import Any, Dict, List

from fastapi import APIRouter

router = APIRouter(tags=["Restricted"])

# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------
SAMPLE_USERS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Amit Lakade", "email": "amit@example.com"},
    {"id": 2, "name": "Ram Kale", "email": "ram@example.com"},
]


@router.get("/restricted", summary="Data for allow-listed origins only")
async def restricted_data() -> Dict[str, Any]:
    """
    GET /api/restricted

    Returns:
        dict: message plus the sample user list.
    """
    return {
        "message": "This data is only accessible from specific origins",
        "users":   SAMPLE_USERS,
    }
