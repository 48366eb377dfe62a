"""Demo client dispatcher, against fake transports and against the real app."""

import pytest
import requests
from fastapi.testclient import TestClient
from requests.structures import CaseInsensitiveDict

from cors_demo.client import cli
from cors_demo.client.actions import ACTIONS, get_action
from cors_demo.client.dispatcher import Dispatcher
from cors_demo.client.state import KIND_AUTH, KIND_CORS, KIND_NETWORK, Failure, Idle, Loading, Success

from conftest import BASE_URL, CLIENT_ORIGIN, EVIL_ORIGIN


class FakeResponse:
    def __init__(self, status_code=200, body=None, headers=None, cookies=None):
        self.status_code = status_code
        self._body = body
        self.headers = CaseInsensitiveDict(headers or {})
        self.cookies = cookies or {}
        self.text = "" if body is None else str(body)

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


class RecordingTransport:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self.responses.pop(0)


def make(transport, settings, origin=CLIENT_ORIGIN):
    return Dispatcher(base_url=BASE_URL, origin=origin, transport=transport, settings=settings)


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------

class TestWithFakeTransport:
    def test_simple_request_has_no_preflight(self, settings):
        transport = RecordingTransport(
            FakeResponse(200, {"message": "ok"}, {"Access-Control-Allow-Origin": "*"})
        )
        client = make(transport, settings)

        state = client.dispatch("public")

        assert state == Success({"message": "ok"}, 200, {})
        assert [c[0] for c in transport.calls] == ["GET"]
        method, url, kwargs = transport.calls[0]
        assert url == BASE_URL + "/api/public"
        assert kwargs["headers"]["Origin"] == CLIENT_ORIGIN
        assert kwargs["timeout"] == settings.REQUEST_TIMEOUT

    def test_missing_allow_origin_is_blocked(self, settings):
        transport = RecordingTransport(FakeResponse(200, {"message": "ok"}))
        state = make(transport, settings).dispatch("public")
        assert isinstance(state, Failure)
        assert state.kind == KIND_CORS
        assert "No 'Access-Control-Allow-Origin'" in state.message

    def test_server_error_field_preferred(self, settings):
        transport = RecordingTransport(FakeResponse(403, {"error": "go away"}))
        state = make(transport, settings).dispatch("restricted")
        assert state == Failure("go away", kind=KIND_CORS, status=403)

    def test_status_text_fallback(self, settings):
        transport = RecordingTransport(FakeResponse(500, None, {"Access-Control-Allow-Origin": "*"}))
        state = make(transport, settings).dispatch("public")
        assert state.message == "Request failed with status code 500"

    def test_transport_error(self, settings):
        def boom(method, url, **kwargs):
            raise requests.ConnectionError("Network Error")

        client = make(boom, settings)
        state = client.dispatch("public")
        assert state == Failure("Network Error", kind=KIND_NETWORK)
        assert not client.busy

    def test_custom_headers_preflights_first(self, settings):
        transport = RecordingTransport(
            FakeResponse(204, None, {
                "Access-Control-Allow-Origin": CLIENT_ORIGIN,
                "Access-Control-Allow-Methods": "POST",
                "Access-Control-Allow-Headers": "X-Custom-Header, Content-Type",
            }),
            FakeResponse(200, {"message": "m"}, {
                "Access-Control-Allow-Origin": CLIENT_ORIGIN,
                "Access-Control-Expose-Headers": "X-Custom-Response-Header",
                "X-Custom-Response-Header": "Custom-Value",
            }),
        )
        state = make(transport, settings).dispatch("custom_headers")

        assert [c[0] for c in transport.calls] == ["OPTIONS", "POST"]
        assert transport.calls[0][2]["headers"]["Access-Control-Request-Headers"] == "content-type,x-custom-header"
        assert isinstance(state, Success)
        assert state.headers == {"x-custom-response-header": "Custom-Value"}

    def test_failed_preflight_skips_actual_request(self, settings):
        transport = RecordingTransport(FakeResponse(403, {"error": "header not allowed"}))
        state = make(transport, settings).dispatch("custom_headers")
        assert state == Failure("header not allowed", kind=KIND_CORS, status=403)
        assert len(transport.calls) == 1

    def test_cookies_only_kept_for_credentialed_requests(self, settings):
        transport = RecordingTransport(
            FakeResponse(200, {"message": "ok"}, {"Access-Control-Allow-Origin": "*"}, cookies={"tracker": "1"})
        )
        client = make(transport, settings)
        client.dispatch("public")
        assert client.cookies == {}

    def test_session_cookie_only_sent_on_credentialed_requests(self, settings):
        credentialed = {"Access-Control-Allow-Origin": CLIENT_ORIGIN, "Access-Control-Allow-Credentials": "true"}
        transport = RecordingTransport(
            FakeResponse(204, None, dict(credentialed, **{"Access-Control-Allow-Methods": "POST",
                                                           "Access-Control-Allow-Headers": "content-type"})),
            FakeResponse(200, {"message": "Logged in as testuser"}, credentialed, cookies={"sessionId": "t"}),
            FakeResponse(200, {"secret": "s"}, credentialed),
            FakeResponse(200, {"message": "ok"}, {"Access-Control-Allow-Origin": "*"}),
        )
        client = make(transport, settings)

        client.dispatch("login")
        client.dispatch("protected")
        client.dispatch("public")

        methods = [(c[0], c[1][len(BASE_URL):]) for c in transport.calls]
        assert methods == [
            ("OPTIONS", "/api/login"),
            ("POST", "/api/login"),
            ("GET", "/api/protected"),
            ("GET", "/api/public"),
        ]
        assert transport.calls[1][2]["cookies"] is None
        assert transport.calls[2][2]["cookies"] == {"sessionId": "t"}
        assert transport.calls[3][2]["cookies"] is None
        assert client.cookies == {"sessionId": "t"}

    def test_cookies_not_kept_without_origin_either(self, settings):
        transport = RecordingTransport(FakeResponse(200, {"message": "ok"}, cookies={"tracker": "1"}))
        client = make(transport, settings, origin="")
        client.dispatch("public")
        assert client.cookies == {}

    def test_no_origin_behaves_like_curl(self, settings):
        transport = RecordingTransport(FakeResponse(200, {"message": "ok"}))
        state = make(transport, settings, origin="").dispatch("restricted")
        assert isinstance(state, Success)
        assert "Origin" not in transport.calls[0][2]["headers"]

    def test_in_flight_dispatch_is_ignored(self, settings):
        seen = []

        def reentrant(method, url, **kwargs):
            seen.append(client.dispatch("restricted"))
            return FakeResponse(200, {"message": "ok"}, {"Access-Control-Allow-Origin": "*"})

        client = make(reentrant, settings)
        state = client.dispatch("public")

        assert seen == [Loading("public")]
        assert isinstance(state, Success)

    def test_reset(self, settings):
        transport = RecordingTransport(FakeResponse(403, {"error": "no"}))
        client = make(transport, settings)
        client.dispatch("restricted")
        assert client.reset() == Idle()
        assert client.state == Idle()
        assert transport.calls and len(transport.calls) == 1

    def test_unknown_action(self, settings):
        with pytest.raises(KeyError, match="unknown action"):
            make(RecordingTransport(), settings).dispatch("teleport")


# ---------------------------------------------------------------------------
# Real app
# ---------------------------------------------------------------------------

def jarless(app):
    """Transport with no cookie jar: a fresh TestClient for every request."""
    def send(method, url, **kwargs):
        return TestClient(app, base_url=BASE_URL).request(method, url, **kwargs)
    return send


class TestAgainstServer:
    def test_every_action_from_client_origin(self, client, settings):
        dispatcher = make(client.request, settings)

        assert isinstance(dispatcher.dispatch("public"), Success)
        restricted = dispatcher.dispatch("restricted")
        assert len(restricted.payload["users"]) == 2

        login = dispatcher.dispatch("login")
        assert login.payload == {"message": "Logged in as testuser"}
        assert "sessionId" in dispatcher.cookies

        protected = dispatcher.dispatch("protected")
        assert protected.payload["secret"] == "You have accessed protected content!"

        custom = dispatcher.dispatch("custom_headers")
        assert custom.headers["x-custom-response-header"] == "Custom-Value"
        assert custom.payload["receivedHeaders"]["x-custom-header"] == "custom-value"

    def test_login_then_protected_relies_on_dispatcher_cookies(self, app, settings):
        dispatcher = make(jarless(app), settings)

        assert dispatcher.dispatch("protected") == Failure("Unauthorized", kind=KIND_AUTH, status=401)
        assert isinstance(dispatcher.dispatch("login"), Success)
        protected = dispatcher.dispatch("protected")
        assert isinstance(protected, Success)
        assert protected.payload["secret"] == "You have accessed protected content!"

    def test_protected_before_login(self, client, settings):
        state = make(client.request, settings).dispatch("protected")
        assert state == Failure("Unauthorized", kind=KIND_AUTH, status=401)

    def test_foreign_origin(self, client, settings):
        dispatcher = make(client.request, settings, origin=EVIL_ORIGIN)

        assert isinstance(dispatcher.dispatch("public"), Success)
        for name in ("restricted", "login", "protected", "custom_headers"):
            state = dispatcher.dispatch(name)
            assert isinstance(state, Failure), name
            assert state.kind == KIND_CORS
            assert EVIL_ORIGIN in state.message
        assert dispatcher.cookies == {}


# ---------------------------------------------------------------------------
# Console front-end
# ---------------------------------------------------------------------------

def test_cli_list(capsys):
    assert cli.main(["--list"]) == 0
    out = capsys.readouterr().out
    for name in ACTIONS:
        assert name in out


def test_cli_runs_actions(client, monkeypatch, capsys):
    monkeypatch.setattr(requests, "request", client.request)
    code = cli.main(["public", "login", "protected", "--base-url", BASE_URL, "--origin", CLIENT_ORIGIN])
    out = capsys.readouterr().out
    assert code == 0
    assert "Logged in as testuser" in out
    assert "You have accessed protected content!" in out


def test_cli_reports_failures(client, monkeypatch, capsys):
    monkeypatch.setattr(requests, "request", client.request)
    code = cli.main(["restricted", "--base-url", BASE_URL, "--origin", EVIL_ORIGIN])
    assert code == 1
    assert "CORS Error (403)" in capsys.readouterr().out


def test_cli_rejects_unknown_action():
    with pytest.raises(SystemExit):
        cli.main(["teleport"])


def test_get_action():
    assert get_action("login").with_credentials
    assert not get_action("public").with_credentials
