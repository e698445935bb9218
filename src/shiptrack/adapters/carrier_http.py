"""Shared plumbing for carrier adapters that speak JSON over HTTP."""

from __future__ import annotations

from abc import ABC, abstractmethod
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar, Protocol

import httpx

from shiptrack.adapters.http_resilience import ResilientClient, default_client_factory
from shiptrack.domain.ports.tracking import CarrierFetchError

if TYPE_CHECKING:
    from collections.abc import Callable

    from shiptrack.config.http_resilience import ResilienceConfig
    from shiptrack.domain.model import Carrier
    from shiptrack.domain.ports.tracking import StatusSnapshot

log = getLogger(__name__)


class CarrierApiConfig(Protocol):
    @property
    def api_key(self) -> str: ...

    @property
    def resilience(self) -> ResilienceConfig: ...


class HttpCarrierAdapter[TConfig: CarrierApiConfig](ABC):
    """Carrier adapter backed by one shared ``ResilientClient``.

    The client is created lazily on first use and dropped by ``aclose`` so the
    adapter can be reused across event loops.
    """

    carrier: ClassVar[Carrier]
    credential_name: ClassVar[str]

    def __init__(
        self,
        *,
        config: TConfig | None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self.config = config
        self._client_factory = client_factory or default_client_factory
        self._client: ResilientClient | None = None

    @property
    def configured(self) -> bool:
        return self.config is not None

    async def fetch_status(self, tracking_number: str) -> StatusSnapshot | None:
        config = self.config
        if config is None:
            log.warning(
                "%s missing, skipping %s sync for %s",
                self.credential_name,
                self.carrier,
                tracking_number,
            )
            return None

        client = self._ensure_client(config)
        try:
            response = await self._request(client, config, tracking_number)
            response.raise_for_status()
            return self._translate(response.json(), tracking_number=tracking_number)
        except (httpx.HTTPError, ValueError) as exc:
            log.error(
                "%s status sync failed for %s: %s",
                self.carrier,
                tracking_number,
                exc,
            )
            raise CarrierFetchError(
                f"{self.carrier} status sync failed: {exc}",
                carrier=self.carrier,
                tracking_number=tracking_number,
            ) from exc

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    def _ensure_client(self, config: TConfig) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(config.resilience)
        return self._client

    @abstractmethod
    async def _request(
        self,
        client: ResilientClient,
        config: TConfig,
        tracking_number: str,
    ) -> httpx.Response: ...

    @abstractmethod
    def _translate(self, payload: object, *, tracking_number: str) -> StatusSnapshot: ...
