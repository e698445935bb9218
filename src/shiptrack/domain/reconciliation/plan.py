"""Per-shipment update plan: the delta between stored and observed state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .merge import missing_events
from .policy import TransitionKind, TransitionPolicy, classify_transition, transition_allowed

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shiptrack.domain.model import ShipmentStatus, TrackingEvent
    from shiptrack.domain.ports.tracking import StatusSnapshot


@dataclass(frozen=True, slots=True, kw_only=True)
class ShipmentUpdatePlan:
    shipment_id: str
    previous_status: ShipmentStatus
    reported_status: ShipmentStatus | None
    transition: TransitionKind
    new_status: ShipmentStatus | None
    events_to_write: tuple[TrackingEvent, ...]

    @property
    def status_changed(self) -> bool:
        return self.new_status is not None

    @property
    def rejected(self) -> bool:
        return self.transition is not TransitionKind.UNCHANGED and self.new_status is None

    @property
    def has_writes(self) -> bool:
        return self.status_changed or bool(self.events_to_write)


def plan_shipment_update(
    *,
    shipment_id: str,
    current_status: ShipmentStatus,
    existing_event_ids: Iterable[str],
    snapshot: StatusSnapshot,
    policy: TransitionPolicy = TransitionPolicy.ACCEPT,
) -> ShipmentUpdatePlan:
    """Compute what must be written for ``snapshot`` given the stored state."""

    reported = snapshot.status
    if reported is None:
        transition = TransitionKind.UNCHANGED
    else:
        transition = classify_transition(current_status, reported)
    new_status = reported if transition_allowed(policy, transition) else None

    return ShipmentUpdatePlan(
        shipment_id=shipment_id,
        previous_status=current_status,
        reported_status=reported,
        transition=transition,
        new_status=new_status,
        events_to_write=missing_events(existing_event_ids, snapshot.events),
    )
