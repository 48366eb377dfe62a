"""
cors_demo/client/server.py

Serves the browser demo page from the client origin.

The page must be loaded from CLIENT_ORIGIN (default http://localhost:5173)
for the exact-origin and credentialed cases to succeed, so it gets its own
small app on CLIENT_PORT, separate from the policy server.

Run with:
    uvicorn cors_demo.client.server:app --host localhost --port 5173
  or:
    python -m cors_demo.client.server
"""

from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse

from cors_demo.app.config import get_settings

STATIC_DIR = Path(__file__).parent / "static"

settings = get_settings()

app = FastAPI(title="CORS Demo Client", docs_url=None, redoc_url=None, openapi_url=None)


@app.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/config.json", include_in_schema=False)
async def page_config() -> dict:
    """Where the page should send its requests."""
    return {"apiBaseUrl": settings.API_BASE_URL}


if __name__ == "__main__":
    import uvicorn

    print(f"🖥  Demo page on http://{settings.CLIENT_HOST}:{settings.CLIENT_PORT} → API {settings.API_BASE_URL}")
    uvicorn.run("cors_demo.client.server:app", host=settings.CLIENT_HOST, port=settings.CLIENT_PORT)
