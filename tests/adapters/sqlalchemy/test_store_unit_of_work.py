from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect

from shiptrack.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    create_store_engine,
    is_started,
    shutdown,
    startup,
)
from shiptrack.domain.model import ShipmentStatus, User
from shiptrack.domain.ports.tracking import StatusSnapshot
from shiptrack.domain.reconciliation import persist_shipment_update
from tests.support.shipments import FIXED_NOW, make_event, make_shipment

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_engine("sqlite+pysqlite:///:memory:")

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_creates_schema(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    tables = set(inspect(sqlite_engine).get_table_names())

    assert {"shipment", "tracking_event", "user_account"} <= tables


def test_startup_reads_database_uri_from_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    database = tmp_path / "from-env.db"
    monkeypatch.setenv("DATABASE_URI", f"sqlite+pysqlite:///{database}")

    startup(force=True)

    assert database.exists()


def test_in_memory_engine_is_shared_across_threads() -> None:
    import threading  # noqa: PLC0415

    startup(engine=create_store_engine("sqlite+pysqlite:///:memory:"), force=True)
    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.users.add(User(uid="u1", email="owner@example.com"))
        uow.commit()

    found: list[User | None] = []

    def read() -> None:
        with SqlAlchemyUnitOfWork() as uow:
            found.append(uow.repositories.users.get("u1"))

    worker = threading.Thread(target=read)
    worker.start()
    worker.join()

    assert found == [User(uid="u1", email="owner@example.com")]


def test_rollback_on_error_discards_writes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyUnitOfWork() as uow:
        uow.repositories.users.add(User(uid="u1"))
        raise RuntimeError("abort")

    with SqlAlchemyUnitOfWork() as uow:
        assert uow.repositories.users.get("u1") is None


def test_persist_shipment_update_against_store(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.users.add(User(uid="u1", email="owner@example.com"))
        uow.repositories.shipments.add(make_shipment("s1"))
        uow.commit()
    snapshot = StatusSnapshot(
        ShipmentStatus.ARRIVED_PORT,
        (make_event("ARRI", "2025-02-28T06:00:00Z"),),
    )

    first = persist_shipment_update(
        SqlAlchemyUnitOfWork, shipment_id="s1", snapshot=snapshot, now=FIXED_NOW
    )
    second = persist_shipment_update(
        SqlAlchemyUnitOfWork, shipment_id="s1", snapshot=snapshot, now=FIXED_NOW
    )

    assert first is not None
    assert first.status_changed
    assert first.events_written == 1
    assert first.owner_email == "owner@example.com"
    assert second is not None
    assert not second.status_changed
    assert second.events_written == 0
    with SqlAlchemyUnitOfWork() as uow:
        stored = uow.repositories.shipments.get("s1")
    assert stored is not None
    assert stored.status is ShipmentStatus.ARRIVED_PORT
    assert stored.last_updated_at == FIXED_NOW
