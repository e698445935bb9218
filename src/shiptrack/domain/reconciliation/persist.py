"""Persist the delta for one shipment inside a single unit of work.

The current record is re-read here rather than trusted from the candidate
listing, so overlapping runs that already wrote the same status or events find
nothing left to do.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from shiptrack.domain.ports.persistence import ShipmentChanges

from .plan import ShipmentUpdatePlan, plan_shipment_update
from .policy import TransitionKind, TransitionPolicy

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from shiptrack.domain.ports.tracking import StatusSnapshot
    from shiptrack.domain.ports.unit_of_work import ShipmentUnitOfWork

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class PersistedUpdate:
    plan: ShipmentUpdatePlan
    status_written: bool
    events_written: int
    owner_uid: str
    owner_email: str | None = None

    @property
    def status_changed(self) -> bool:
        return self.status_written


def persist_shipment_update(
    unit_of_work_factory: Callable[[], ShipmentUnitOfWork],
    *,
    shipment_id: str,
    snapshot: StatusSnapshot,
    now: datetime,
    policy: TransitionPolicy = TransitionPolicy.ACCEPT,
) -> PersistedUpdate | None:
    """Write whatever ``snapshot`` adds to the stored shipment.

    Returns ``None`` when the shipment vanished or was archived since it was
    listed. The status write is conditional on the status read here, so of
    two overlapping runs only one reports the transition.
    """

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        current = repositories.shipments.get(shipment_id)
        if current is None or current.archived:
            log.info("Shipment %s no longer active, skipping persistence", shipment_id)
            return None

        plan = plan_shipment_update(
            shipment_id=shipment_id,
            current_status=current.status,
            existing_event_ids=repositories.events.existing_ids(shipment_id),
            snapshot=snapshot,
            policy=policy,
        )
        if plan.transition is TransitionKind.REGRESSIVE:
            log.warning(
                "Carrier %s reported regressive status for shipment %s: %s -> %s (%s)",
                current.carrier,
                shipment_id,
                plan.previous_status,
                plan.reported_status,
                "rejected" if plan.rejected else "accepted",
            )

        events_written = 0
        if plan.events_to_write:
            events_written = repositories.events.add_missing(shipment_id, plan.events_to_write)

        status_written = False
        if plan.status_changed:
            status_written = repositories.shipments.apply_changes(
                shipment_id,
                ShipmentChanges(
                    last_updated_at=now,
                    status=plan.new_status,
                    expected_status=plan.previous_status,
                ),
            )
            if not status_written:
                log.info(
                    "Shipment %s left %s before this run could write %s, not notifying",
                    shipment_id,
                    plan.previous_status,
                    plan.new_status,
                )
        if events_written and not status_written:
            repositories.shipments.apply_changes(
                shipment_id, ShipmentChanges(last_updated_at=now)
            )
        if status_written or events_written:
            uow.commit()

        owner_email: str | None = None
        if status_written:
            owner = repositories.users.get(current.owner_uid)
            owner_email = owner.email if owner is not None else None

    return PersistedUpdate(
        plan=plan,
        status_written=status_written,
        events_written=events_written,
        owner_uid=current.owner_uid,
        owner_email=owner_email,
    )
