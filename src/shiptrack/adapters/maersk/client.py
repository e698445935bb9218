"""HTTP adapter for the Maersk Track & Trace API."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from shiptrack.adapters.carrier_http import HttpCarrierAdapter
from shiptrack.config.carriers import MaerskConfig
from shiptrack.domain.model import Carrier

from .translator import translate_tracking

if TYPE_CHECKING:
    import httpx

    from shiptrack.adapters.http_resilience import ResilientClient
    from shiptrack.domain.ports.tracking import StatusSnapshot

SHIPMENTS_PATH = "shipments"


class MaerskAdapter(HttpCarrierAdapter[MaerskConfig]):
    carrier: ClassVar[Carrier] = Carrier.MAERSK
    credential_name: ClassVar[str] = "MAERSK_API_KEY"

    async def _request(
        self,
        client: ResilientClient,
        config: MaerskConfig,
        tracking_number: str,
    ) -> httpx.Response:
        return await client.get(
            SHIPMENTS_PATH,
            params={"referenceType": "CONTAINER", "referenceValue": tracking_number},
            headers={"x-api-key": config.api_key},
        )

    def _translate(self, payload: object, *, tracking_number: str) -> StatusSnapshot:
        return translate_tracking(payload, tracking_number=tracking_number)


if TYPE_CHECKING:
    from shiptrack.domain.ports.tracking import CarrierAdapter

    _adapter_check: CarrierAdapter = MaerskAdapter(config=None)
