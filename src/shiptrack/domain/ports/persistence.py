"""Ports for persisting shipments, their events and reading owners."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from shiptrack.domain.model import Shipment, ShipmentStatus, TrackingEvent, User


@dataclass(frozen=True, slots=True, kw_only=True)
class ShipmentChanges:
    """Partial update for the reconciliation-owned fields of a shipment."""

    last_updated_at: datetime
    status: ShipmentStatus | None = None
    # compare-and-set guard: the write only applies while the stored status matches
    expected_status: ShipmentStatus | None = None


@runtime_checkable
class ShipmentRepository(Protocol):
    """Persistence contract for shipments."""

    def add(self, shipment: Shipment) -> None: ...

    def get(self, shipment_id: str) -> Shipment | None: ...

    def list_active(self) -> Sequence[Shipment]: ...

    def apply_changes(self, shipment_id: str, changes: ShipmentChanges) -> bool:
        """Apply ``changes`` and report whether a row matched."""
        ...

    def set_archived(self, shipment_id: str, *, archived: bool) -> bool: ...


@runtime_checkable
class TrackingEventRepository(Protocol):
    """Persistence contract for a shipment's event timeline."""

    def list_for(self, shipment_id: str) -> Sequence[TrackingEvent]: ...

    def existing_ids(self, shipment_id: str) -> frozenset[str]: ...

    def add_missing(self, shipment_id: str, events: Iterable[TrackingEvent]) -> int:
        """Insert events whose id is not stored yet and return how many were written."""
        ...


@runtime_checkable
class UserRepository(Protocol):
    """Persistence contract for users."""

    def add(self, user: User) -> None: ...

    def get(self, uid: str) -> User | None: ...
