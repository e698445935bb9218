"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from shiptrack.adapters.carriers import build_carrier_registry
from shiptrack.adapters.sendgrid import SendGridNotifier
from shiptrack.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from shiptrack.config import (
    MissingConfigurationError,
    get_mail_config,
    get_reconciliation_config,
)
from shiptrack.domain.model import Carrier, Shipment, ShipmentStatus, User, UserRole
from shiptrack.domain.ports.unit_of_work import ShipmentUnitOfWork
from shiptrack.domain.reconciliation import ReconciliationJob

if TYPE_CHECKING:
    from datetime import datetime

    from shiptrack.config import ReconciliationConfig
    from shiptrack.domain.ports.notification import Notifier
    from shiptrack.domain.ports.tracking import CarrierStatusSource
    from shiptrack.domain.reconciliation import ReconciliationSummary

UnitOfWorkFactory = Callable[[], ShipmentUnitOfWork]


log = getLogger(__name__)


def _ensure_store() -> None:
    if not is_started():
        startup()


def _build_notifier() -> SendGridNotifier:
    try:
        config = get_mail_config()
    except MissingConfigurationError:
        log.warning("SENDGRID_API_KEY not set; status-change mail is disabled")
        config = None
    return SendGridNotifier(config=config)


def build_reconciliation_job(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    carriers: CarrierStatusSource | None = None,
    notifier: Notifier | None = None,
    config: ReconciliationConfig | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ReconciliationJob:
    """Wire a reconciliation job from the configured adapters."""

    if unit_of_work_factory is None:
        _ensure_store()
    job = ReconciliationJob(
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork,
        carriers=carriers or build_carrier_registry(),
        notifier=notifier or _build_notifier(),
        config=config or get_reconciliation_config(),
    )
    if clock is not None:
        job.clock = clock
    return job


def poll_carrier_updates(*, job: ReconciliationJob | None = None) -> ReconciliationSummary:
    """Run one reconciliation cycle over all active shipments."""

    job = job or build_reconciliation_job()
    log.info("Starting carrier poll")
    return job.run()


def create_user(
    *,
    email: str | None,
    role: UserRole = UserRole.USER,
    uid: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> User:
    """Create and persist a new user."""

    if unit_of_work_factory is None:
        _ensure_store()
    factory = unit_of_work_factory or SqlAlchemyUnitOfWork
    user = User(uid=uid or uuid4().hex, email=email, role=role)
    with factory() as uow:
        uow.repositories.users.add(user)
        uow.commit()
    return user


def register_shipment(  # noqa: PLR0913
    *,
    owner_uid: str,
    carrier: Carrier,
    tracking_number: str,
    status: ShipmentStatus = ShipmentStatus.CREATED,
    shipment_id: str | None = None,
    now: datetime | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Shipment:
    """Persist a new shipment for an existing owner."""

    tracking_number = tracking_number.strip()
    if not tracking_number:
        raise ValueError("Tracking number must not be empty")
    if unit_of_work_factory is None:
        _ensure_store()
    factory = unit_of_work_factory or SqlAlchemyUnitOfWork
    with factory() as uow:
        if uow.repositories.users.get(owner_uid) is None:
            raise ValueError(f"Unknown owner: {owner_uid}")
        shipment = Shipment(
            id=shipment_id or uuid4().hex,
            owner_uid=owner_uid,
            carrier=carrier,
            tracking_number=tracking_number,
            status=status,
            created_at=now,
            last_updated_at=now,
        )
        uow.repositories.shipments.add(shipment)
        uow.commit()
    return shipment


def archive_shipment(
    shipment_id: str,
    *,
    archived: bool = True,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    """Take a shipment out of (or back into) reconciliation."""

    if unit_of_work_factory is None:
        _ensure_store()
    factory = unit_of_work_factory or SqlAlchemyUnitOfWork
    with factory() as uow:
        if not uow.repositories.shipments.set_archived(shipment_id, archived=archived):
            raise LookupError(f"Unknown shipment: {shipment_id}")
        uow.commit()
