"""Scheduled reconciliation of active shipments against carrier status.

One run lists every non-archived shipment, asks the carrier for its live status,
persists the delta and notifies the owner on a status transition. Each shipment
is an isolated unit of work: a failure is logged, counted and never stops the
rest of the batch. Only a failure to list the candidates aborts the run.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from shiptrack.config.reconciliation import ReconciliationConfig
from shiptrack.domain.ports.notification import DeliveryOutcome, StatusChangeNotice
from shiptrack.domain.ports.tracking import CarrierFetchError

from .contracts import ReconciliationSummary, ShipmentOutcome
from .persist import PersistedUpdate, persist_shipment_update
from .policy import TransitionPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from shiptrack.domain.model import Shipment
    from shiptrack.domain.ports.notification import Notifier
    from shiptrack.domain.ports.tracking import CarrierStatusSource
    from shiptrack.domain.ports.unit_of_work import ShipmentUnitOfWork

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ReconciliationJob:
    unit_of_work_factory: Callable[[], ShipmentUnitOfWork]
    carriers: CarrierStatusSource
    notifier: Notifier
    config: ReconciliationConfig = field(default_factory=ReconciliationConfig)
    clock: Callable[[], datetime] = _utcnow

    @property
    def policy(self) -> TransitionPolicy:
        if self.config.reject_regressive:
            return TransitionPolicy.REJECT_REGRESSIVE
        return TransitionPolicy.ACCEPT

    def run(self) -> ReconciliationSummary:
        return asyncio.run(self.run_async())

    async def run_async(self) -> ReconciliationSummary:
        """Reconcile all active shipments and return the run counters."""

        shipments = await asyncio.to_thread(self._list_candidates)
        log.info("Reconciling %s active shipments", len(shipments))

        slots = asyncio.Semaphore(self.config.max_concurrency)
        store_slots = asyncio.Semaphore(self.config.store_concurrency)
        try:
            outcomes = await asyncio.gather(
                *(self._reconcile_isolated(shipment, slots, store_slots) for shipment in shipments)
            )
        finally:
            # clients are bound to this event loop
            await self.carriers.aclose()
            await self.notifier.aclose()

        summary = ReconciliationSummary.from_outcomes(outcomes)
        log.info(
            "Reconciliation finished: processed=%s, updated=%s, events=%s, notified=%s, "
            "skipped=%s, failed=%s",
            summary.processed,
            summary.updated,
            summary.events_written,
            summary.notified,
            summary.skipped,
            summary.failed,
        )
        return summary

    def _list_candidates(self) -> Sequence[Shipment]:
        with self.unit_of_work_factory() as uow:
            return list(uow.repositories.shipments.list_active())

    async def _reconcile_isolated(
        self,
        shipment: Shipment,
        slots: asyncio.Semaphore,
        store_slots: asyncio.Semaphore,
    ) -> ShipmentOutcome:
        async with slots:
            try:
                return await self._reconcile(shipment, store_slots)
            except CarrierFetchError as exc:
                log.warning(
                    "Carrier fetch failed for shipment %s (%s %s): %s",
                    shipment.id,
                    shipment.carrier,
                    shipment.tracking_number,
                    exc,
                )
            except Exception:
                log.exception(
                    "Failed to sync shipment %s (%s %s)",
                    shipment.id,
                    shipment.carrier,
                    shipment.tracking_number,
                )
        return ShipmentOutcome(shipment_id=shipment.id, failed=True)

    async def _reconcile(
        self,
        shipment: Shipment,
        store_slots: asyncio.Semaphore,
    ) -> ShipmentOutcome:
        snapshot = await self.carriers.fetch_status(shipment.carrier, shipment.tracking_number)
        if snapshot is None:
            return ShipmentOutcome(shipment_id=shipment.id, skipped=True)

        async with store_slots:
            update = await asyncio.to_thread(
                persist_shipment_update,
                self.unit_of_work_factory,
                shipment_id=shipment.id,
                snapshot=snapshot,
                now=self.clock(),
                policy=self.policy,
            )
        if update is None:
            return ShipmentOutcome(shipment_id=shipment.id, skipped=True)

        notified = False
        if update.status_changed:
            log.info(
                "Shipment %s (%s %s) moved %s -> %s",
                shipment.id,
                shipment.carrier,
                shipment.tracking_number,
                update.plan.previous_status,
                update.plan.new_status,
            )
            notified = await self._notify(shipment, update)

        return ShipmentOutcome(
            shipment_id=shipment.id,
            status_changed=update.status_changed,
            events_written=update.events_written,
            notified=notified,
        )

    async def _notify(self, shipment: Shipment, update: PersistedUpdate) -> bool:
        """Best-effort owner notification; persisted changes stand either way."""

        if not update.owner_email:
            log.warning(
                "Owner email not found for shipment %s (owner %s)",
                shipment.id,
                update.owner_uid,
            )
            return False

        new_status = update.plan.new_status
        if new_status is None:
            return False
        notice = StatusChangeNotice(
            carrier=shipment.carrier,
            tracking_number=shipment.tracking_number,
            previous_status=update.plan.previous_status,
            current_status=new_status,
        )
        try:
            outcome = await self.notifier.notify(update.owner_email, notice)
        except Exception:
            log.exception(
                "Failed to notify owner of shipment %s (%s %s)",
                shipment.id,
                shipment.carrier,
                shipment.tracking_number,
            )
            return False
        return outcome is DeliveryOutcome.SENT
