"""Translate HMM payloads into status snapshots."""

from __future__ import annotations

from logging import getLogger

from shiptrack.adapters.status_mapping import build_status_table, map_carrier_status
from shiptrack.domain.model import ShipmentStatus, TrackingEvent, tracking_event_id
from shiptrack.domain.ports.tracking import StatusSnapshot

from .schema import HmmEvent, HmmTrackingResponse

log = getLogger(__name__)

HMM_STATUS_TABLE = build_status_table(
    {
        ShipmentStatus.CREATED: ("BOOKED", "BOOKING", "EMPTY PICKUP"),
        ShipmentStatus.IN_TRANSIT: ("ON BOARD", "DEPARTURE", "IN TRANSIT", "T/S"),
        ShipmentStatus.ARRIVED_PORT: ("ARRIVAL", "ARRIVED", "UNLOADED", "DISCHARGE"),
        ShipmentStatus.OUT_FOR_DELIVERY: ("GATE OUT", "INLAND TRANSIT", "OUT FOR DELIVERY"),
        ShipmentStatus.DELIVERED: ("DELIVERED", "EMPTY RETURN", "COMPLETE"),
        ShipmentStatus.EXCEPTION: ("EXCEPTION", "HOLD", "DELAYED"),
    }
)


def translate_tracking(
    payload: HmmTrackingResponse | object,
    *,
    tracking_number: str,
) -> StatusSnapshot:
    response = (
        payload
        if isinstance(payload, HmmTrackingResponse)
        else HmmTrackingResponse.model_validate(payload)
    )

    status = map_carrier_status(response.status, HMM_STATUS_TABLE)
    if status is None and response.status is not None:
        log.warning("Unmapped HMM status %r for %s", response.status, tracking_number)

    events: list[TrackingEvent] = []
    for item in response.events:
        event = _translate_event(item, tracking_number)
        if event is not None:
            events.append(event)
    return StatusSnapshot(status=status, events=tuple(events))


def _translate_event(item: HmmEvent, tracking_number: str) -> TrackingEvent | None:
    if item.code is None or item.datetime is None:
        log.warning("Dropping HMM event without code or datetime for %s", tracking_number)
        return None
    return TrackingEvent(
        id=tracking_event_id(item.code, item.datetime),
        status=item.code,
        description=item.description,
        location=item.location,
        timestamp=item.datetime,
    )
