"""Outbound HTTP client shared by the carrier and mail adapters.

One ``ResilientClient`` per integration: a per-call timeout, a client-side rate
limit, an optional retry transport and an optional response cache. Carrier and
mail calls are configured with ``NO_RETRY``; a failed call is reported to the
caller and picked up again by the next reconciliation cycle.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from shiptrack.config.storage import get_storage_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from shiptrack.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


def build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    """Return hishel storage for ``config``, or ``None`` when caching is off."""

    if config is None or not config.enabled:
        return None
    if config.backend == "sqlite":
        database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
    elif config.backend == "memory":
        database_path = ":memory:"
    else:
        raise ValueError(f"Unsupported cache backend: {config.backend}")
    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )


class ResilientClient:
    """Rate-limited ``httpx.AsyncClient`` bound to one upstream API.

    The underlying client belongs to the event loop that first uses it; call
    ``aclose`` before the loop ends.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        transport = RetryTransport(retry=build_retry(config.retry))
        headers = dict(config.default_headers) if config.default_headers else None
        storage = build_cache_storage(config.cache)
        if storage is not None:
            self._client: httpx.AsyncClient = AsyncCacheClient(
                base_url=config.base_url or "",
                timeout=config.timeout_seconds,
                headers=headers,
                transport=transport,
                storage=storage,
            )
        else:
            self._client = httpx.AsyncClient(
                base_url=config.base_url or "",
                timeout=config.timeout_seconds,
                headers=headers,
                transport=transport,
            )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        return await self._send("GET", path, params=params, headers=headers)

    async def post(
        self,
        path: str,
        *,
        json: object = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        return await self._send("POST", path, json=json, headers=headers)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        json: object = None,
    ) -> httpx.Response:
        if self._limiter is not None:
            await self._limiter.acquire()
        try:
            response = await self._client.request(
                method, path, params=params, headers=headers, json=json
            )
        except httpx.TimeoutException:
            log.warning(
                "%s %s %s timed out after %ss",
                self.config.name,
                method,
                path,
                self.config.timeout_seconds,
            )
            raise
        log.debug(
            "%s %s %s -> %s",
            self.config.name,
            method,
            path,
            response.status_code,
        )
        return response


def default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)
