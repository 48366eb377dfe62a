"""
cors_demo/client/actions.py

The demo client's actions: one outbound request each, against a fixed route.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Action:
    name:             str
    label:            str
    description:      str
    method:           str
    path:             str
    body:             Optional[Dict[str, Any]] = None
    headers:          Dict[str, str]          = field(default_factory=dict)
    with_credentials: bool                    = False


ACTIONS: Dict[str, Action] = {
    a.name: a
    for a in (
        Action(
            name="public",
            label="Public Request",
            description="No CORS restrictions",
            method="GET",
            path="/api/public",
        ),
        Action(
            name="restricted",
            label="Restricted Request",
            description="Specific origin only",
            method="GET",
            path="/api/restricted",
        ),
        Action(
            name="login",
            label="Login (Set Cookie)",
            description="With credentials",
            method="POST",
            path="/api/login",
            body={"username": "testuser"},
            with_credentials=True,
        ),
        Action(
            name="protected",
            label="Protected Data",
            description="Requires cookie",
            method="GET",
            path="/api/protected",
            with_credentials=True,
        ),
        Action(
            name="custom_headers",
            label="Custom Headers Request",
            description="Triggers preflight",
            method="POST",
            path="/api/with-headers",
            body={"someData": "value"},
            headers={"X-Custom-Header": "custom-value", "Content-Type": "application/json"},
        ),
    )
}


def get_action(name: str) -> Action:
    """
    Look up an action by name.

    Raises:
        KeyError: with the list of known names when `name` is unknown.
    """
    try:
        return ACTIONS[name]
    except KeyError:
        raise KeyError(f"unknown action {name!r}; choose from {', '.join(ACTIONS)}") from None
