"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

CacheBackend = Literal["sqlite", "memory"]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset(
            {"DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"}
        )
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


# Failed calls are picked up again by the next scheduled cycle.
NO_RETRY = RetryPolicy(total=0)


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    enabled: bool = True
    backend: CacheBackend = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None


def get_http_cache_config(*, ttl_seconds: float) -> CacheConfig | None:
    """Return the response cache configured via ``SHIPTRACK_HTTP_CACHE``.

    Accepts ``off`` (default), ``memory`` or ``sqlite``.
    """

    raw = (os.getenv("SHIPTRACK_HTTP_CACHE") or "off").strip().lower()
    if raw in {"", "off", "none", "0"}:
        return None
    if raw == "memory":
        return CacheConfig(backend="memory", default_ttl_seconds=ttl_seconds)
    if raw == "sqlite":
        return CacheConfig(backend="sqlite", default_ttl_seconds=ttl_seconds)
    raise ConfigurationError(f"Unsupported SHIPTRACK_HTTP_CACHE value: {raw!r}")
