"""Per-source fetch result: ``ok(payload)`` or ``fail(kind)``."""

import time
from dataclasses import dataclass, field
from typing import Any

RATE_LIMITED = "rate_limited"
INVALID_JSON = "invalid_json"
NOT_CONFIGURED = "not_configured"
NO_DOMAIN = "no_domain"
INVALID_PAYLOAD = "invalid_payload"


@dataclass(frozen=True)
class UpstreamResponse:
    source: str
    address: str = ""  # what was fetched; empty when not tied to one address
    payload: dict[str, Any] = field(default_factory=dict)
    fetched_at: float = 0.0
    success: bool = False
    error: str | None = None
    params: dict[str, Any] = field(default_factory=dict)
    cached: bool = False

    @classmethod
    def ok(
        cls,
        source: str,
        payload: dict[str, Any],
        *,
        params: dict[str, Any] | None = None,
        cached: bool = False,
        fetched_at: float | None = None,
        address: str = "",
    ) -> "UpstreamResponse":
        return cls(
            source=source,
            address=address,
            payload=payload,
            fetched_at=time.time() if fetched_at is None else fetched_at,
            success=True,
            params=params or {},
            cached=cached,
        )

    @classmethod
    def fail(
        cls,
        source: str,
        error: str,
        *,
        params: dict[str, Any] | None = None,
        address: str = "",
    ) -> "UpstreamResponse":
        return cls(
            source=source,
            address=address,
            fetched_at=time.time(),
            success=False,
            error=error,
            params=params or {},
        )
