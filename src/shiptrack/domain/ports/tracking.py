"""Ports for fetching live shipment status from carriers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shiptrack.domain.model import Carrier, ShipmentStatus, TrackingEvent


@dataclass(frozen=True, slots=True)
class StatusSnapshot:
    """Normalized carrier view of one shipment.

    ``status`` is ``None`` when the carrier reported nothing mappable; the events
    are still worth merging in that case.
    """

    status: ShipmentStatus | None
    events: tuple[TrackingEvent, ...] = field(default_factory=tuple)


class CarrierFetchError(RuntimeError):
    """Raised when a carrier call fails for transport or payload reasons."""

    def __init__(self, message: str, *, carrier: Carrier, tracking_number: str) -> None:
        super().__init__(message)
        self.carrier = carrier
        self.tracking_number = tracking_number


@runtime_checkable
class CarrierAdapter(Protocol):
    """Fetch the live status of one tracking reference from one carrier.

    Returns ``None`` when the adapter has nothing to say (for example, missing
    credentials). Raises ``CarrierFetchError`` when the call itself failed.
    """

    carrier: Carrier

    async def fetch_status(self, tracking_number: str) -> StatusSnapshot | None: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class CarrierStatusSource(Protocol):
    """Carrier-polymorphic entry point used by the reconciliation job."""

    async def fetch_status(
        self, carrier: Carrier, tracking_number: str
    ) -> StatusSnapshot | None: ...

    async def aclose(self) -> None: ...
