"""
cors_demo/client/state.py

Demo client state as a tagged variant.

Exactly one of these is current at any time, so "a response and an error at
once" cannot be represented:

    Idle                       nothing shown
    Loading(action)            a request is outstanding
    Success(payload, ...)      last action returned JSON
    Failure(message, kind)     last action was rejected or failed
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

# Failure kinds
KIND_CORS    = "cors"      # 403 or blocked by cross-origin enforcement
KIND_AUTH    = "auth"      # 401
KIND_NETWORK = "network"   # transport error, nothing came back
KIND_ERROR   = "error"     # anything else


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    action: str


@dataclass(frozen=True)
class Success:
    payload: Any
    status:  int            = 200
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Failure:
    message: str
    kind:    str           = KIND_ERROR
    status:  Optional[int] = None


ClientState = Union[Idle, Loading, Success, Failure]


def kind_for_status(status: Optional[int]) -> str:
    """Classify an HTTP status; every 403 here is a cross-origin denial."""
    if status == 403:
        return KIND_CORS
    if status == 401:
        return KIND_AUTH
    if status is None:
        return KIND_NETWORK
    return KIND_ERROR


def render(state: ClientState) -> str:
    """Text shown for a state in the console front-end."""
    if isinstance(state, Loading):
        return f"… {state.action} in flight"
    if isinstance(state, Success):
        lines = [f"API Response ({state.status})"]
        for name, value in sorted(state.headers.items()):
            lines.append(f"  {name}: {value}")
        lines.append(json.dumps(state.payload, indent=2))
        return "\n".join(lines)
    if isinstance(state, Failure):
        title = "CORS Error" if state.kind == KIND_CORS else "Error"
        status = f" ({state.status})" if state.status is not None else ""
        return f"{title}{status}: {state.message}"
    return "(no result)"
