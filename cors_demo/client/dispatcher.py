"""
cors_demo/client/dispatcher.py

Demo client dispatcher.

Maps each action to exactly one outbound request against the policy server
(plus the preflight a browser would send first) and turns the outcome into
a ClientState.  Requests go out through `requests`; tests inject any
callable with the same `(method, url, **kwargs)` signature.

Usage:
    from cors_demo.client.dispatcher import Dispatcher

    client = Dispatcher()
    client.dispatch("login")
    client.dispatch("protected")
    print(render(client.state))
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Union

import requests

from cors_demo.app.config import Settings, get_settings
from cors_demo.client.actions import Action, get_action
from cors_demo.client.browser import (
    CORSBlocked,
    check_preflight,
    check_response,
    is_simple_request,
    preflight_request_headers,
    readable_headers,
)
from cors_demo.client.state import (
    KIND_CORS,
    KIND_NETWORK,
    ClientState,
    Failure,
    Idle,
    Loading,
    Success,
    kind_for_status,
)

logger = logging.getLogger(__name__)

Transport = Callable[..., Any]


class Dispatcher:
    """
    Issues demo actions and keeps the last outcome.

    Args:
        base_url (str | None): Server address; defaults to API_BASE_URL.
        origin (str | None): Origin of the simulated page; defaults to
            CLIENT_ORIGIN.  Pass "" to behave like a non-browser caller
            (no Origin header, no enforcement).
        transport (callable | None): Defaults to requests.request.
        timeout (float | None): Per-request timeout; defaults to REQUEST_TIMEOUT.
    """

    def __init__(
        self,
        base_url:  Optional[str] = None,
        origin:    Optional[str] = None,
        transport: Optional[Transport] = None,
        timeout:   Optional[float] = None,
        settings:  Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.origin = settings.CLIENT_ORIGIN if origin is None else origin
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self._transport = transport or requests.request
        self._cookies: Dict[str, str] = {}
        self._state: ClientState = Idle()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def busy(self) -> bool:
        """True while a request is outstanding; action triggers should be disabled."""
        return isinstance(self._state, Loading)

    @property
    def cookies(self) -> Dict[str, str]:
        return dict(self._cookies)

    def reset(self) -> ClientState:
        """Clear the last response / error without issuing a request."""
        self._state = Idle()
        return self._state

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def dispatch(self, action: Union[str, Action]) -> ClientState:
        """
        Run one action and return the resulting state.

        While another action is in flight the call is ignored and the
        current (Loading) state is returned.
        """
        if isinstance(action, str):
            action = get_action(action)

        if self.busy:
            logger.warning("[client] %s ignored: %s still in flight", action.name, self._state.action)
            return self._state

        self._state = Loading(action.name)
        try:
            self._state = self._perform(action)
        except requests.RequestException as exc:
            logger.warning("[client] %s transport error: %s", action.name, exc)
            self._state = Failure(str(exc) or "Network Error", kind=KIND_NETWORK)
        finally:
            if self.busy:
                self._state = Idle()
        return self._state

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _perform(self, action: Action) -> ClientState:
        url = self.base_url + action.path
        headers = dict(action.headers)
        if action.body is not None and not any(h.lower() == "content-type" for h in headers):
            headers["Content-Type"] = "application/json"

        if self.origin:
            headers["Origin"] = self.origin
            if not is_simple_request(action.method, headers):
                logger.debug("[client] preflight OPTIONS %s", url)
                preflight = self._send(
                    "OPTIONS", url, headers=preflight_request_headers(self.origin, action.method, headers)
                )
                try:
                    check_preflight(preflight, url, self.origin, action.method, headers, action.with_credentials)
                except CORSBlocked as exc:
                    return self._failure(preflight, blocked=str(exc))

        response = self._send(
            action.method,
            url,
            headers=headers,
            json=action.body,
            cookies=dict(self._cookies) if action.with_credentials and self._cookies else None,
        )

        if self.origin:
            try:
                check_response(response, url, self.origin, action.with_credentials)
            except CORSBlocked as exc:
                return self._failure(response, blocked=str(exc))

        # Cookies are only kept from credentialed responses, as a browser does.
        if action.with_credentials:
            self._cookies.update(dict(response.cookies))

        if not 200 <= response.status_code < 300:
            return self._failure(response)

        logger.info("[client] %s → %d", action.name, response.status_code)
        return Success(
            payload=_json_or_text(response),
            status=response.status_code,
            headers=readable_headers(response.headers, action.with_credentials),
        )

    def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        return self._transport(method, url, timeout=self.timeout, **kwargs)

    def _failure(self, response: Any, blocked: Optional[str] = None) -> Failure:
        """Prefer the server's `error` field, then the enforcement / status text."""
        body = _json_or_text(response)
        message = body.get("error") if isinstance(body, dict) else None
        if not message:
            message = blocked or f"Request failed with status code {response.status_code}"

        kind = KIND_CORS if blocked else kind_for_status(response.status_code)
        logger.info("[client] failure (%s, %d): %s", kind, response.status_code, message)
        return Failure(message=message, kind=kind, status=response.status_code)


def _json_or_text(response: Any) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
