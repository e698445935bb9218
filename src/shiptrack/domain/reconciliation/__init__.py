"""Reconciliation of stored shipments against live carrier status.

Stages, leaves first:
1) merge carrier events into the stored timeline (``merge``)
2) classify the reported status against the stored one (``policy``)
3) compute the per-shipment delta (``plan``)
4) write the delta inside one unit of work (``persist``)
5) fan out over active shipments and notify owners (``job``)
"""

from __future__ import annotations

from .contracts import ReconciliationSummary, ShipmentOutcome
from .job import ReconciliationJob
from .merge import merge_events, merged_timeline, missing_events, sort_timeline
from .persist import PersistedUpdate, persist_shipment_update
from .plan import ShipmentUpdatePlan, plan_shipment_update
from .policy import TransitionKind, TransitionPolicy, classify_transition, transition_allowed

__all__ = [
    "PersistedUpdate",
    "ReconciliationJob",
    "ReconciliationSummary",
    "ShipmentOutcome",
    "ShipmentUpdatePlan",
    "TransitionKind",
    "TransitionPolicy",
    "classify_transition",
    "merge_events",
    "merged_timeline",
    "missing_events",
    "persist_shipment_update",
    "plan_shipment_update",
    "sort_timeline",
    "transition_allowed",
]
