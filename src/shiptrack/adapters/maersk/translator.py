"""Translate Maersk payloads into status snapshots."""

from __future__ import annotations

from logging import getLogger

from shiptrack.adapters.status_mapping import build_status_table, map_carrier_status
from shiptrack.domain.model import ShipmentStatus, TrackingEvent, tracking_event_id
from shiptrack.domain.ports.tracking import StatusSnapshot

from .schema import MaerskEvent, MaerskTrackingResponse

log = getLogger(__name__)

MAERSK_STATUS_TABLE = build_status_table(
    {
        ShipmentStatus.CREATED: ("PLANNED", "BOOKED", "BOOKING CONFIRMED"),
        ShipmentStatus.IN_TRANSIT: (
            "IN TRANSIT",
            "LOADED",
            "DEPARTED",
            "VESSEL DEPARTURE",
            "TRANSSHIPMENT",
        ),
        ShipmentStatus.ARRIVED_PORT: ("ARRIVED", "VESSEL ARRIVAL", "DISCHARGED"),
        ShipmentStatus.OUT_FOR_DELIVERY: ("GATE OUT", "OUT FOR DELIVERY", "ON CARRIAGE"),
        ShipmentStatus.DELIVERED: ("DELIVERED", "COMPLETED", "EMPTY RETURNED"),
        ShipmentStatus.EXCEPTION: ("EXCEPTION", "ON HOLD", "CANCELLED"),
    }
)


def translate_tracking(
    payload: MaerskTrackingResponse | object,
    *,
    tracking_number: str,
) -> StatusSnapshot:
    response = (
        payload
        if isinstance(payload, MaerskTrackingResponse)
        else MaerskTrackingResponse.model_validate(payload)
    )

    raw_status = response.transport_status
    status = map_carrier_status(raw_status, MAERSK_STATUS_TABLE)
    if status is None and raw_status is not None:
        log.warning("Unmapped Maersk status %r for %s", raw_status, tracking_number)

    events = tuple(
        event
        for event in (_translate_event(item, tracking_number) for item in response.events)
        if event is not None
    )
    return StatusSnapshot(status=status, events=events)


def _translate_event(item: MaerskEvent, tracking_number: str) -> TrackingEvent | None:
    if item.event_code is None or item.event_date_time is None:
        log.warning("Dropping Maersk event without code or time for %s", tracking_number)
        return None
    return TrackingEvent(
        id=tracking_event_id(item.event_code, item.event_date_time),
        status=item.event_code,
        description=item.event_description,
        location=item.location.name if item.location else None,
        timestamp=item.event_date_time,
    )
