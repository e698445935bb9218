"""SQLAlchemy adapter package for ShipTrack."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    metadata,
    shipment_table,
    tracking_event_table,
    user_table,
)
from .repositories import (
    SqlAlchemyShipmentRepository,
    SqlAlchemyTrackingEventRepository,
    SqlAlchemyUserRepository,
)
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    create_store_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyShipmentRepository",
    "SqlAlchemyTrackingEventRepository",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyUserRepository",
    "StartupError",
    "create_all_tables",
    "create_store_engine",
    "metadata",
    "shipment_table",
    "tracking_event_table",
    "user_table",
    "shutdown",
    "startup",
]
