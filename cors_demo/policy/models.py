"""
cors_demo/policy/models.py

Immutable cross-origin policy values.

A RoutePolicy describes who may call one route and what the calling script
may send and read.  Policies are validated when they are constructed, so an
invalid combination (for example credentials with a wildcard origin or
an origin list) stops the server at startup instead of surfacing per request.

Usage:
    from cors_demo.policy.models import RoutePolicy, PolicyTable

    table = PolicyTable.of(
        RoutePolicy(path="/api/public", origins="*", allow_methods=("GET",)),
    )
    table.for_path("/api/public")
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

WILDCARD = "*"

# Request headers a browser never asks permission for.
SAFELISTED_REQUEST_HEADERS: FrozenSet[str] = frozenset(
    {"accept", "accept-language", "content-language", "content-type"}
)

# Response headers a browser script can always read.
SAFELISTED_RESPONSE_HEADERS: FrozenSet[str] = frozenset(
    {
        "cache-control",
        "content-language",
        "content-length",
        "content-type",
        "expires",
        "last-modified",
        "pragma",
    }
)


class OriginMode(str, Enum):
    WILDCARD = "wildcard"
    EXACT = "exact"
    LIST = "list"


class RoutePolicy(BaseModel):
    """Cross-origin policy for a single route."""

    model_config = ConfigDict(frozen=True)

    path:              str
    origins:           Union[str, Tuple[str, ...]]
    allow_credentials: bool                       = False
    allow_methods:     Tuple[str, ...]            = ("GET",)
    allow_headers:     Optional[Tuple[str, ...]]  = None   # None → reflect requested headers
    expose_headers:    Tuple[str, ...]            = ()
    max_age:           int                        = Field(600, ge=0)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("path must start with '/'")
        return v

    @field_validator("origins", mode="before")
    @classmethod
    def normalise_origins(cls, v):
        # Lists arrive from settings; keep them hashable.
        if isinstance(v, (list, set, frozenset)):
            return tuple(v)
        return v

    @field_validator("allow_methods")
    @classmethod
    def upper_methods(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("allow_methods must not be empty")
        return tuple(m.upper() for m in v)

    @model_validator(mode="after")
    def check_origins(self) -> "RoutePolicy":
        if isinstance(self.origins, tuple):
            if not self.origins:
                raise ValueError(f"{self.path}: origin list must not be empty")
            if WILDCARD in self.origins:
                raise ValueError(f"{self.path}: '*' cannot appear inside an origin list")
        elif not self.origins:
            raise ValueError(f"{self.path}: origin must not be empty")

        if self.allow_credentials and self.mode is not OriginMode.EXACT:
            raise ValueError(
                f"{self.path}: a policy that allows credentials must name one exact "
                "origin, not '*' or a list"
            )
        return self

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def mode(self) -> OriginMode:
        if isinstance(self.origins, tuple):
            return OriginMode.LIST
        if self.origins == WILDCARD:
            return OriginMode.WILDCARD
        return OriginMode.EXACT

    @property
    def allowed_header_names(self) -> Optional[FrozenSet[str]]:
        """Lower-cased permitted request headers, or None when any header is reflected."""
        if self.allow_headers is None:
            return None
        return frozenset(h.lower() for h in self.allow_headers)

    def allows_origin(self, origin: str) -> bool:
        if self.mode is OriginMode.WILDCARD:
            return True
        if self.mode is OriginMode.EXACT:
            return origin == self.origins
        return origin in self.origins

    def describe(self) -> str:
        """One-line summary used in the startup banner."""
        origins = ", ".join(self.origins) if isinstance(self.origins, tuple) else self.origins
        parts = [f"{self.mode.value}={origins}", "methods=" + ",".join(self.allow_methods)]
        if self.allow_credentials:
            parts.append("credentials")
        if self.allow_headers is not None:
            parts.append("headers=" + ",".join(self.allow_headers))
        if self.expose_headers:
            parts.append("expose=" + ",".join(self.expose_headers))
        return "  ".join(parts)


class PolicyTable:
    """
    Read-only path → RoutePolicy mapping.

    Built once at startup and handed to the policy middleware; paths that are
    not in the table are not governed by any cross-origin policy.
    """

    def __init__(self, policies: Iterable[RoutePolicy]) -> None:
        by_path: Dict[str, RoutePolicy] = {}
        for policy in policies:
            if policy.path in by_path:
                raise ValueError(f"duplicate policy for path {policy.path}")
            by_path[policy.path] = policy
        self._by_path = by_path

    @classmethod
    def of(cls, *policies: RoutePolicy) -> "PolicyTable":
        return cls(policies)

    def for_path(self, path: str) -> Optional[RoutePolicy]:
        return self._by_path.get(path)

    @property
    def paths(self) -> List[str]:
        return list(self._by_path)

    def __iter__(self) -> Iterator[RoutePolicy]:
        return iter(self._by_path.values())

    def __len__(self) -> int:
        return len(self._by_path)

    def __contains__(self, path: object) -> bool:
        return path in self._by_path
