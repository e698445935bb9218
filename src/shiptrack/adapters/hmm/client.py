"""HTTP adapter for the HMM tracking API."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from shiptrack.adapters.carrier_http import HttpCarrierAdapter
from shiptrack.config.carriers import HmmConfig
from shiptrack.domain.model import Carrier

from .translator import translate_tracking

if TYPE_CHECKING:
    import httpx

    from shiptrack.adapters.http_resilience import ResilientClient
    from shiptrack.domain.ports.tracking import StatusSnapshot

TRACK_PATH = "track"


class HmmAdapter(HttpCarrierAdapter[HmmConfig]):
    carrier: ClassVar[Carrier] = Carrier.HMM
    credential_name: ClassVar[str] = "HMM_API_KEY"

    async def _request(
        self,
        client: ResilientClient,
        config: HmmConfig,
        tracking_number: str,
    ) -> httpx.Response:
        return await client.get(
            TRACK_PATH,
            params={"trackingNumber": tracking_number},
            headers={"x-api-key": config.api_key},
        )

    def _translate(self, payload: object, *, tracking_number: str) -> StatusSnapshot:
        return translate_tracking(payload, tracking_number=tracking_number)
