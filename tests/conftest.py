"""Shared fixtures: a policy server built from explicit settings and a TestClient on it."""

import pytest
from fastapi.testclient import TestClient

from cors_demo.app.config import Settings
from cors_demo.app.main import create_app

CLIENT_ORIGIN = "http://localhost:5173"
PRODUCTION_ORIGIN = "https://your-production-domain.com"
EVIL_ORIGIN = "http://evil.example"
BASE_URL = "https://testserver"


@pytest.fixture
def settings() -> Settings:
    s = Settings()
    s.CLIENT_ORIGIN = CLIENT_ORIGIN
    s.RESTRICTED_ORIGINS = [CLIENT_ORIGIN, PRODUCTION_ORIGIN]
    s.PREFLIGHT_MAX_AGE = 600
    s.SESSION_COOKIE_NAME = "sessionId"
    s.API_BASE_URL = BASE_URL
    s.REQUEST_TIMEOUT = 5.0
    return s


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # https so the Secure session cookie is sent back by the cookie jar
    with TestClient(app, base_url=BASE_URL) as c:
        yield c
