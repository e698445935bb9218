"""Domain model for shipments, tracking events and their owners."""

from __future__ import annotations

from .enums import STATUS_PROGRESSION, Carrier, ShipmentStatus, UserRole
from .shipment import Shipment, TrackingEvent, tracking_event_id
from .user import User

__all__ = [
    "STATUS_PROGRESSION",
    "Carrier",
    "Shipment",
    "ShipmentStatus",
    "TrackingEvent",
    "User",
    "UserRole",
    "tracking_event_id",
]
