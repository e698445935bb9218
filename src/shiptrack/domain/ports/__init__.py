"""Domain port definitions for adapters."""

from __future__ import annotations

from .notification import DeliveryOutcome, NotificationError, Notifier, StatusChangeNotice
from .persistence import (
    ShipmentChanges,
    ShipmentRepository,
    TrackingEventRepository,
    UserRepository,
)
from .tracking import CarrierAdapter, CarrierFetchError, CarrierStatusSource, StatusSnapshot
from .unit_of_work import (
    RepositoryCollection,
    ShipmentRepositories,
    ShipmentUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "CarrierAdapter",
    "CarrierFetchError",
    "CarrierStatusSource",
    "DeliveryOutcome",
    "NotificationError",
    "Notifier",
    "RepositoryCollection",
    "ShipmentChanges",
    "ShipmentRepositories",
    "ShipmentRepository",
    "ShipmentUnitOfWork",
    "StatusChangeNotice",
    "StatusSnapshot",
    "TrackingEventRepository",
    "UnitOfWork",
    "UserRepository",
]
