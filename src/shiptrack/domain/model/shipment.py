"""Shipment aggregate and its tracking timeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import Carrier, ShipmentStatus


def tracking_event_id(code: str, timestamp: str) -> str:
    """Return the de-duplication key for a carrier-reported event.

    Both parts come straight from the carrier payload, so polling an unchanged
    history always yields the same id.
    """

    return f"{code}-{timestamp}"


@dataclass(frozen=True, slots=True, kw_only=True)
class TrackingEvent:
    id: str
    status: str
    description: str | None = None
    location: str | None = None
    timestamp: str | None = None


@dataclass(slots=True, kw_only=True)
class Shipment:
    """A shipment owned by exactly one user.

    Only ``status``, ``last_updated_at`` and the event timeline are touched by
    reconciliation; the remaining descriptive fields belong to the owner.
    """

    id: str
    owner_uid: str
    carrier: Carrier
    tracking_number: str
    status: ShipmentStatus
    archived: bool = False
    created_at: datetime | None = None
    last_updated_at: datetime | None = None

    vessel_name: str | None = None
    eta: str | None = None
    departure_date: str | None = None
    arrival_date: str | None = None
    port_of_loading: str | None = None
    port_of_discharge: str | None = None
    price: float | None = None
    weight: float | None = None

    events: tuple[TrackingEvent, ...] = field(default_factory=tuple)
