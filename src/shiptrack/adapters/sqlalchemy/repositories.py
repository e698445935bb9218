"""Repository implementations backed by SQLAlchemy sessions.

Writes are partial: reconciliation only ever touches ``status``,
``last_updated_at`` and the event table, so concurrent edits to the remaining
shipment columns survive.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import insert, select, update
from sqlalchemy.dialects import postgresql, sqlite

from shiptrack.adapters.sqlalchemy.mappings import (
    shipment_table,
    tracking_event_table,
    user_table,
)
from shiptrack.domain.model import Shipment, TrackingEvent, User
from shiptrack.domain.reconciliation.merge import missing_events, sort_timeline

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from sqlalchemy import CursorResult
    from sqlalchemy.orm import Session

    from shiptrack.domain.ports.persistence import ShipmentChanges

_EVENT_KEY = ("shipment_id", "id")


def _shipment_row(shipment: Shipment) -> dict[str, object]:
    return {
        "id": shipment.id,
        "owner_uid": shipment.owner_uid,
        "carrier": shipment.carrier,
        "tracking_number": shipment.tracking_number,
        "status": shipment.status,
        "archived": shipment.archived,
        "created_at": shipment.created_at,
        "last_updated_at": shipment.last_updated_at,
        "vessel_name": shipment.vessel_name,
        "eta": shipment.eta,
        "departure_date": shipment.departure_date,
        "arrival_date": shipment.arrival_date,
        "port_of_loading": shipment.port_of_loading,
        "port_of_discharge": shipment.port_of_discharge,
        "price": shipment.price,
        "weight": shipment.weight,
    }


def _to_shipment(
    row: Mapping[str, Any],
    events: tuple[TrackingEvent, ...] = (),
) -> Shipment:
    return Shipment(
        id=row["id"],
        owner_uid=row["owner_uid"],
        carrier=row["carrier"],
        tracking_number=row["tracking_number"],
        status=row["status"],
        archived=row["archived"],
        created_at=row["created_at"],
        last_updated_at=row["last_updated_at"],
        vessel_name=row["vessel_name"],
        eta=row["eta"],
        departure_date=row["departure_date"],
        arrival_date=row["arrival_date"],
        port_of_loading=row["port_of_loading"],
        port_of_discharge=row["port_of_discharge"],
        price=row["price"],
        weight=row["weight"],
        events=events,
    )


def _event_row(shipment_id: str, event: TrackingEvent) -> dict[str, object]:
    return {
        "shipment_id": shipment_id,
        "id": event.id,
        "status": event.status,
        "description": event.description,
        "location": event.location,
        "timestamp": event.timestamp,
    }


class SqlAlchemyTrackingEventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for(self, shipment_id: str) -> Sequence[TrackingEvent]:
        stmt = select(tracking_event_table).where(
            tracking_event_table.c.shipment_id == shipment_id
        )
        rows = self.session.execute(stmt).mappings().all()
        return sort_timeline(
            TrackingEvent(
                id=row["id"],
                status=row["status"],
                description=row["description"],
                location=row["location"],
                timestamp=row["timestamp"],
            )
            for row in rows
        )

    def existing_ids(self, shipment_id: str) -> frozenset[str]:
        stmt = select(tracking_event_table.c.id).where(
            tracking_event_table.c.shipment_id == shipment_id
        )
        return frozenset(self.session.execute(stmt).scalars().all())

    def add_missing(self, shipment_id: str, events: Iterable[TrackingEvent]) -> int:
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            return self._insert_ignoring_conflicts(sqlite.insert, shipment_id, events)
        if dialect == "postgresql":
            return self._insert_ignoring_conflicts(postgresql.insert, shipment_id, events)

        fresh = missing_events(self.existing_ids(shipment_id), events)
        for event in fresh:
            self.session.execute(insert(tracking_event_table).values(_event_row(shipment_id, event)))
        return len(fresh)

    def _insert_ignoring_conflicts(
        self,
        insert_factory: Any,
        shipment_id: str,
        events: Iterable[TrackingEvent],
    ) -> int:
        written = 0
        for event in events:
            stmt = (
                insert_factory(tracking_event_table)
                .values(_event_row(shipment_id, event))
                .on_conflict_do_nothing(index_elements=list(_EVENT_KEY))
            )
            result = cast("CursorResult[Any]", self.session.execute(stmt))
            written += max(result.rowcount, 0)
        return written


class SqlAlchemyShipmentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, shipment: Shipment) -> None:
        self.session.execute(insert(shipment_table).values(_shipment_row(shipment)))
        if shipment.events:
            SqlAlchemyTrackingEventRepository(self.session).add_missing(
                shipment.id, shipment.events
            )

    def get(self, shipment_id: str) -> Shipment | None:
        stmt = select(shipment_table).where(shipment_table.c.id == shipment_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        if row is None:
            return None
        events = SqlAlchemyTrackingEventRepository(self.session).list_for(shipment_id)
        return _to_shipment(row, tuple(events))

    def list_active(self) -> Sequence[Shipment]:
        """Return every non-archived shipment, without its event timeline."""

        stmt = (
            select(shipment_table)
            .where(shipment_table.c.archived.is_(False))
            .order_by(shipment_table.c.id)
        )
        return [_to_shipment(row) for row in self.session.execute(stmt).mappings().all()]

    def apply_changes(self, shipment_id: str, changes: ShipmentChanges) -> bool:
        values: dict[str, object] = {"last_updated_at": changes.last_updated_at}
        if changes.status is not None:
            values["status"] = changes.status
        stmt = update(shipment_table).where(shipment_table.c.id == shipment_id)
        if changes.expected_status is not None:
            stmt = stmt.where(shipment_table.c.status == changes.expected_status)
        result = cast("CursorResult[Any]", self.session.execute(stmt.values(values)))
        return result.rowcount > 0

    def set_archived(self, shipment_id: str, *, archived: bool) -> bool:
        stmt = (
            update(shipment_table)
            .where(shipment_table.c.id == shipment_id)
            .values(archived=archived)
        )
        result = cast("CursorResult[Any]", self.session.execute(stmt))
        return result.rowcount > 0


class SqlAlchemyUserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, user: User) -> None:
        self.session.execute(
            insert(user_table).values(
                uid=user.uid,
                email=user.email,
                role=user.role,
            )
        )

    def get(self, uid: str) -> User | None:
        stmt = select(user_table).where(user_table.c.uid == uid)
        row = self.session.execute(stmt).mappings().one_or_none()
        if row is None:
            return None
        return User(
            uid=row["uid"],
            email=row["email"],
            role=row["role"],
        )


if TYPE_CHECKING:
    from shiptrack.domain.ports.persistence import (
        ShipmentRepository,
        TrackingEventRepository,
        UserRepository,
    )

    _session_stub = cast("Session", object())
    _shipment_repo: ShipmentRepository = SqlAlchemyShipmentRepository(_session_stub)
    _event_repo: TrackingEventRepository = SqlAlchemyTrackingEventRepository(_session_stub)
    _user_repo: UserRepository = SqlAlchemyUserRepository(_session_stub)
