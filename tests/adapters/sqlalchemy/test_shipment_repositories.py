from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from shiptrack.adapters.sqlalchemy import tracking_event_table
from shiptrack.domain.model import Carrier, ShipmentStatus, User, UserRole
from shiptrack.domain.ports.persistence import ShipmentChanges
from tests.support.shipments import make_event, make_shipment

if TYPE_CHECKING:
    from collections.abc import Callable

    from shiptrack.adapters.sqlalchemy import SqlAlchemyUnitOfWork

pytestmark = pytest.mark.integration


def _seed(factory: Callable[[], SqlAlchemyUnitOfWork]) -> None:
    with factory() as uow:
        uow.repositories.users.add(
            User(uid="u1", email="owner@example.com", role=UserRole.ADMIN)
        )
        uow.repositories.shipments.add(
            make_shipment(
                "s1",
                events=[make_event("DEPA", "2025-02-20T10:00:00Z", location="Busan")],
            )
        )
        uow.repositories.shipments.add(
            make_shipment(
                "s2",
                carrier=Carrier.HMM,
                tracking_number="HMMU7654321",
                archived=True,
            )
        )
        uow.commit()


def test_shipment_round_trips_with_timeline(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    _seed(sqlite_unit_of_work)

    with sqlite_unit_of_work() as uow:
        shipment = uow.repositories.shipments.get("s1")
        user = uow.repositories.users.get("u1")

    assert shipment is not None
    assert shipment.carrier is Carrier.MAERSK
    assert shipment.status is ShipmentStatus.IN_TRANSIT
    assert shipment.created_at == datetime(2025, 2, 1, tzinfo=UTC)
    assert shipment.vessel_name == "MAERSK ESSEX"
    assert [event.id for event in shipment.events] == ["DEPA-2025-02-20T10:00:00Z"]
    assert shipment.events[0].location == "Busan"
    assert user is not None
    assert user.role is UserRole.ADMIN


def test_enums_are_stored_by_value(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    _seed(sqlite_unit_of_work)

    with sqlite_unit_of_work() as uow:
        row = uow.session.execute(
            text("SELECT carrier, status FROM shipment WHERE id = :id"), {"id": "s1"}
        ).one()

    assert tuple(row) == ("maersk", "in_transit")


def test_list_active_excludes_archived(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    _seed(sqlite_unit_of_work)

    with sqlite_unit_of_work() as uow:
        active = uow.repositories.shipments.list_active()

    assert [shipment.id for shipment in active] == ["s1"]


def test_add_missing_inserts_each_event_once(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    _seed(sqlite_unit_of_work)
    batch = [
        make_event("DEPA", "2025-02-20T10:00:00Z"),
        make_event("ARRI", "2025-02-28T06:00:00Z"),
    ]

    with sqlite_unit_of_work() as uow:
        first = uow.repositories.events.add_missing("s1", batch)
        uow.commit()
    with sqlite_unit_of_work() as uow:
        second = uow.repositories.events.add_missing("s1", batch)
        uow.commit()
        ids = uow.repositories.events.existing_ids("s1")
        count = len(uow.session.execute(select(tracking_event_table.c.id)).all())

    assert first == 1
    assert second == 0
    assert ids == {"DEPA-2025-02-20T10:00:00Z", "ARRI-2025-02-28T06:00:00Z"}
    assert count == 2


def test_apply_changes_leaves_descriptive_fields_alone(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    _seed(sqlite_unit_of_work)
    now = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)

    with sqlite_unit_of_work() as uow:
        uow.repositories.shipments.apply_changes(
            "s1", ShipmentChanges(last_updated_at=now, status=ShipmentStatus.ARRIVED_PORT)
        )
        uow.commit()
    with sqlite_unit_of_work() as uow:
        uow.repositories.shipments.apply_changes("s1", ShipmentChanges(last_updated_at=now))
        uow.commit()
        shipment = uow.repositories.shipments.get("s1")

    assert shipment is not None
    assert shipment.status is ShipmentStatus.ARRIVED_PORT
    assert shipment.last_updated_at == now
    assert shipment.vessel_name == "MAERSK ESSEX"
    assert shipment.port_of_loading == "Busan"


def test_set_archived_reports_unknown_shipments(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    _seed(sqlite_unit_of_work)

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.shipments.set_archived("s2", archived=False)
        assert not uow.repositories.shipments.set_archived("missing", archived=True)
        uow.commit()
        active = uow.repositories.shipments.list_active()

    assert {shipment.id for shipment in active} == {"s1", "s2"}


def test_duplicate_shipment_id_is_rejected(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    _seed(sqlite_unit_of_work)

    with pytest.raises(IntegrityError), sqlite_unit_of_work() as uow:
        uow.repositories.shipments.add(make_shipment("s1"))
        uow.commit()


def test_apply_changes_with_expected_status_is_compare_and_set(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    _seed(sqlite_unit_of_work)
    now = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)
    changes = ShipmentChanges(
        last_updated_at=now,
        status=ShipmentStatus.ARRIVED_PORT,
        expected_status=ShipmentStatus.IN_TRANSIT,
    )

    with sqlite_unit_of_work() as uow:
        first = uow.repositories.shipments.apply_changes("s1", changes)
        second = uow.repositories.shipments.apply_changes("s1", changes)
        uow.commit()
        shipment = uow.repositories.shipments.get("s1")

    assert first is True
    assert second is False
    assert shipment is not None
    assert shipment.status is ShipmentStatus.ARRIVED_PORT
