from __future__ import annotations

import asyncio

import httpx
import pytest

from shiptrack.adapters.carriers import CarrierRegistry, build_carrier_registry
from shiptrack.adapters.hmm import HmmAdapter
from shiptrack.adapters.maersk import MaerskAdapter
from shiptrack.domain.model import Carrier, ShipmentStatus
from tests.support.http import make_client_factory


def test_registry_rejects_duplicate_carriers() -> None:
    registry = CarrierRegistry([MaerskAdapter(config=None)])

    with pytest.raises(ValueError, match="already registered"):
        registry.register(MaerskAdapter(config=None))


def test_registry_skips_unsupported_carriers() -> None:
    registry = CarrierRegistry([MaerskAdapter(config=None), HmmAdapter(config=None)])

    assert asyncio.run(registry.fetch_status(Carrier.OTHER, "ABC123")) is None
    assert set(registry.carriers) == {Carrier.MAERSK, Carrier.HMM}


def test_build_registry_without_credentials_disables_carriers(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("MAERSK_API_KEY", raising=False)
    monkeypatch.delenv("HMM_API_KEY", raising=False)

    registry = build_carrier_registry()

    maersk = registry.get(Carrier.MAERSK)
    assert isinstance(maersk, MaerskAdapter)
    assert not maersk.configured
    assert asyncio.run(registry.fetch_status(Carrier.HMM, "HMMU7654321")) is None


def test_build_registry_dispatches_by_carrier(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAERSK_API_KEY", "maersk-key")
    monkeypatch.setenv("HMM_API_KEY", "hmm-key")
    monkeypatch.delenv("SHIPTRACK_HTTP_CACHE", raising=False)
    hosts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        if request.url.host == "api.hmm21.com":
            return httpx.Response(200, json={"status": "DELIVERED", "events": []})
        return httpx.Response(200, json={"schedules": [], "events": []})

    registry = build_carrier_registry(client_factory=make_client_factory(handler))

    async def scenario() -> None:
        try:
            hmm = await registry.fetch_status(Carrier.HMM, "HMMU7654321")
            maersk = await registry.fetch_status(Carrier.MAERSK, "MSKU1234567")
        finally:
            await registry.aclose()
        assert hmm is not None
        assert hmm.status is ShipmentStatus.DELIVERED
        assert maersk is not None
        assert maersk.status is None

    asyncio.run(scenario())

    assert hosts == ["api.hmm21.com", "api.maersk.com"]
