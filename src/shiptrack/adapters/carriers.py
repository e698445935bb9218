"""Carrier registry: maps carrier identifiers onto adapters."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shiptrack.adapters.hmm import HmmAdapter
from shiptrack.adapters.maersk import MaerskAdapter
from shiptrack.config.carriers import get_hmm_config, get_maersk_config
from shiptrack.config.errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from shiptrack.adapters.http_resilience import ResilientClient
    from shiptrack.config.http_resilience import ResilienceConfig
    from shiptrack.domain.model import Carrier
    from shiptrack.domain.ports.tracking import CarrierAdapter, StatusSnapshot

log = getLogger(__name__)


class CarrierRegistry:
    """Dispatch status lookups to the adapter registered for a carrier.

    Carriers without an entry (``other`` included) are never polled.
    """

    def __init__(self, adapters: Iterable[CarrierAdapter] = ()) -> None:
        self._adapters: dict[Carrier, CarrierAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: CarrierAdapter) -> None:
        if adapter.carrier in self._adapters:
            raise ValueError(f"Adapter already registered for carrier {adapter.carrier}")
        self._adapters[adapter.carrier] = adapter

    def get(self, carrier: Carrier) -> CarrierAdapter | None:
        return self._adapters.get(carrier)

    @property
    def carriers(self) -> Mapping[Carrier, CarrierAdapter]:
        return dict(self._adapters)

    async def fetch_status(self, carrier: Carrier, tracking_number: str) -> StatusSnapshot | None:
        adapter = self._adapters.get(carrier)
        if adapter is None:
            log.debug("Carrier %s not implemented, skipping sync for %s", carrier, tracking_number)
            return None
        return await adapter.fetch_status(tracking_number)

    async def aclose(self) -> None:
        for adapter in self._adapters.values():
            await adapter.aclose()


def _optional_config[T](loader: Callable[[], T], carrier: str) -> T | None:
    try:
        return loader()
    except MissingConfigurationError as exc:
        log.warning("%s tracking disabled: %s", carrier, exc)
        return None


def build_carrier_registry(
    *,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> CarrierRegistry:
    """Build the registry for every supported carrier from the environment.

    Carriers whose credential is missing stay registered; their adapter logs and
    reports no data on each call.
    """

    return CarrierRegistry(
        (
            MaerskAdapter(
                config=_optional_config(get_maersk_config, "Maersk"),
                client_factory=client_factory,
            ),
            HmmAdapter(
                config=_optional_config(get_hmm_config, "HMM"),
                client_factory=client_factory,
            ),
        )
    )


if TYPE_CHECKING:
    from shiptrack.domain.ports.tracking import CarrierStatusSource

    _registry_check: CarrierStatusSource = CarrierRegistry()
