from __future__ import annotations

import asyncio

import httpx
import pytest

from shiptrack.adapters.hmm import HmmAdapter, translate_tracking
from shiptrack.config import get_hmm_config
from shiptrack.domain.model import ShipmentStatus
from shiptrack.domain.ports.tracking import CarrierFetchError
from tests.support.http import make_client_factory

TRACKING_PAYLOAD: dict[str, object] = {
    "status": "In Transit",
    "events": [
        {
            "code": "LOAD",
            "datetime": "2025-02-18T03:00:00+09:00",
            "description": "Loaded on vessel",
            "location": "Busan",
        },
        {"code": "", "datetime": "2025-02-19T03:00:00+09:00"},
    ],
}


@pytest.fixture
def hmm_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HMM_API_KEY", "hmm-key")
    monkeypatch.delenv("SHIPTRACK_HTTP_CACHE", raising=False)


def test_translate_tracking_keeps_carrier_timestamps_verbatim() -> None:
    snapshot = translate_tracking(TRACKING_PAYLOAD, tracking_number="HMMU7654321")

    assert snapshot.status is ShipmentStatus.IN_TRANSIT
    assert len(snapshot.events) == 1
    event = snapshot.events[0]
    assert event.id == "LOAD-2025-02-18T03:00:00+09:00"
    assert event.timestamp == "2025-02-18T03:00:00+09:00"
    assert event.location == "Busan"


def test_translate_tracking_with_unknown_status_keeps_events() -> None:
    payload = {**TRACKING_PAYLOAD, "status": "Customs inspection"}

    snapshot = translate_tracking(payload, tracking_number="HMMU7654321")

    assert snapshot.status is None
    assert len(snapshot.events) == 1


@pytest.mark.usefixtures("hmm_env")
def test_adapter_requests_tracking_number() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=TRACKING_PAYLOAD)

    adapter = HmmAdapter(config=get_hmm_config(), client_factory=make_client_factory(handler))

    snapshot = asyncio.run(adapter.fetch_status("HMMU7654321"))

    assert snapshot is not None
    assert snapshot.status is ShipmentStatus.IN_TRANSIT
    request = seen[0]
    assert request.url.host == "api.hmm21.com"
    assert request.url.path == "/track"
    assert request.url.params["trackingNumber"] == "HMMU7654321"


@pytest.mark.usefixtures("hmm_env")
def test_adapter_http_error_raises_carrier_fetch_error() -> None:
    adapter = HmmAdapter(
        config=get_hmm_config(),
        client_factory=make_client_factory(lambda _request: httpx.Response(401)),
    )

    with pytest.raises(CarrierFetchError, match="hmm status sync failed"):
        asyncio.run(adapter.fetch_status("HMMU7654321"))


@pytest.mark.usefixtures("hmm_env")
def test_adapter_keeps_status_when_events_are_null() -> None:
    adapter = HmmAdapter(
        config=get_hmm_config(),
        client_factory=make_client_factory(
            lambda _request: httpx.Response(200, json={"status": "In Transit", "events": None})
        ),
    )

    snapshot = asyncio.run(adapter.fetch_status("HMMU7654321"))

    assert snapshot is not None
    assert snapshot.status is ShipmentStatus.IN_TRANSIT
    assert snapshot.events == ()
