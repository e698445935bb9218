"""Transition policy applied to carrier-reported statuses.

Carrier data is authoritative by default: whatever status the carrier reports
is persisted, even if it appears to move the shipment backwards. Regressive
reports are always logged; ``REJECT_REGRESSIVE`` additionally refuses to
persist them (events are still merged).
"""

from __future__ import annotations

from enum import StrEnum

from shiptrack.domain.model import STATUS_PROGRESSION, ShipmentStatus

_RANK: dict[ShipmentStatus, int] = {status: rank for rank, status in enumerate(STATUS_PROGRESSION)}


class TransitionPolicy(StrEnum):
    ACCEPT = "accept"
    REJECT_REGRESSIVE = "reject_regressive"


class TransitionKind(StrEnum):
    UNCHANGED = "unchanged"
    FORWARD = "forward"
    REGRESSIVE = "regressive"
    # Into or out of EXCEPTION, which has no place in the progression.
    LATERAL = "lateral"


def classify_transition(previous: ShipmentStatus, current: ShipmentStatus) -> TransitionKind:
    if previous == current:
        return TransitionKind.UNCHANGED
    previous_rank = _RANK.get(previous)
    current_rank = _RANK.get(current)
    if previous_rank is None or current_rank is None:
        return TransitionKind.LATERAL
    if current_rank > previous_rank:
        return TransitionKind.FORWARD
    return TransitionKind.REGRESSIVE


def transition_allowed(policy: TransitionPolicy, kind: TransitionKind) -> bool:
    if kind is TransitionKind.UNCHANGED:
        return False
    if kind is TransitionKind.REGRESSIVE:
        return policy is TransitionPolicy.ACCEPT
    return True
