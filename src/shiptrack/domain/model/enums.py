"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Carrier(StrEnum):
    MAERSK = "maersk"
    HMM = "hmm"
    OTHER = "other"


class ShipmentStatus(StrEnum):
    CREATED = "created"
    IN_TRANSIT = "in_transit"
    ARRIVED_PORT = "arrived_port"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    EXCEPTION = "exception"


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


# Nominal progression of a shipment. EXCEPTION sits outside it.
STATUS_PROGRESSION: tuple[ShipmentStatus, ...] = (
    ShipmentStatus.CREATED,
    ShipmentStatus.IN_TRANSIT,
    ShipmentStatus.ARRIVED_PORT,
    ShipmentStatus.OUT_FOR_DELIVERY,
    ShipmentStatus.DELIVERED,
)
