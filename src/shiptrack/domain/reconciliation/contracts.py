"""Result types reported by the reconciliation job."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True, kw_only=True)
class ShipmentOutcome:
    shipment_id: str
    status_changed: bool = False
    events_written: int = 0
    notified: bool = False
    skipped: bool = False
    failed: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationSummary:
    """Counters for one reconciliation run."""

    processed: int = 0
    updated: int = 0
    events_written: int = 0
    notified: int = 0
    skipped: int = 0
    failed: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[ShipmentOutcome]) -> ReconciliationSummary:
        collected = list(outcomes)
        return cls(
            processed=len(collected),
            updated=sum(1 for outcome in collected if outcome.status_changed),
            events_written=sum(outcome.events_written for outcome in collected),
            notified=sum(1 for outcome in collected if outcome.notified),
            skipped=sum(1 for outcome in collected if outcome.skipped),
            failed=sum(1 for outcome in collected if outcome.failed),
        )

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
