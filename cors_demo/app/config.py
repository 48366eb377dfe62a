"""
cors_demo/app/config.py

Environment configuration loader for the CORS demo.

Uses python-dotenv to load and expose all application settings from the
`.env` file in a strongly-typed Settings class.  The same settings are read
by the policy server and by the demo client, so the client always targets
the address the server is listening on.
"""

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

# Load .env from the current working directory
load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


class Settings:
    """
    Central configuration class.

    All attribute names exactly match the keys defined in .env.
    """

    # -----------------------------------------------------------------------
    # 🌐 Application
    # -----------------------------------------------------------------------
    APP_NAME: str = os.getenv("APP_NAME", "CORS Demo Server")
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = _as_bool(os.getenv("DEBUG", "False"))
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "3001"))

    # -----------------------------------------------------------------------
    # 🔀 Cross-origin policy
    # -----------------------------------------------------------------------
    # The one page origin trusted by the exact-origin and credentialed routes.
    CLIENT_ORIGIN: str = os.getenv("CLIENT_ORIGIN", "http://localhost:5173")
    # Stored as comma-separated string in .env; exposed as a list here.
    RESTRICTED_ORIGINS: List[str] = [
        o.strip()
        for o in os.getenv(
            "RESTRICTED_ORIGINS",
            "http://localhost:5173,https://your-production-domain.com",
        ).split(",")
        if o.strip()
    ]
    PREFLIGHT_MAX_AGE: int = int(os.getenv("PREFLIGHT_MAX_AGE", "600"))

    # -----------------------------------------------------------------------
    # 🍪 Demo session
    # -----------------------------------------------------------------------
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "sessionId")

    # -----------------------------------------------------------------------
    # 🖥 Demo client
    # -----------------------------------------------------------------------
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:3001")
    CLIENT_HOST: str = os.getenv("CLIENT_HOST", "localhost")
    CLIENT_PORT: int = int(os.getenv("CLIENT_PORT", "5173"))
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "10"))

    # -----------------------------------------------------------------------
    # 📊 Logging
    # -----------------------------------------------------------------------
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return a cached singleton Settings instance.

    Using lru_cache ensures the .env file is parsed only once per
    application lifetime.
    """
    return Settings()
