from __future__ import annotations

import pytest

from shiptrack.domain.model import ShipmentStatus
from shiptrack.domain.reconciliation import (
    TransitionKind,
    TransitionPolicy,
    classify_transition,
    transition_allowed,
)


@pytest.mark.parametrize(
    ("previous", "current", "expected"),
    [
        (ShipmentStatus.IN_TRANSIT, ShipmentStatus.IN_TRANSIT, TransitionKind.UNCHANGED),
        (ShipmentStatus.IN_TRANSIT, ShipmentStatus.ARRIVED_PORT, TransitionKind.FORWARD),
        (ShipmentStatus.CREATED, ShipmentStatus.DELIVERED, TransitionKind.FORWARD),
        (ShipmentStatus.ARRIVED_PORT, ShipmentStatus.IN_TRANSIT, TransitionKind.REGRESSIVE),
        (ShipmentStatus.IN_TRANSIT, ShipmentStatus.EXCEPTION, TransitionKind.LATERAL),
        (ShipmentStatus.EXCEPTION, ShipmentStatus.CREATED, TransitionKind.LATERAL),
    ],
)
def test_classify_transition(
    previous: ShipmentStatus,
    current: ShipmentStatus,
    expected: TransitionKind,
) -> None:
    assert classify_transition(previous, current) is expected


def test_accept_policy_persists_every_change() -> None:
    policy = TransitionPolicy.ACCEPT

    assert transition_allowed(policy, TransitionKind.FORWARD)
    assert transition_allowed(policy, TransitionKind.REGRESSIVE)
    assert transition_allowed(policy, TransitionKind.LATERAL)
    assert not transition_allowed(policy, TransitionKind.UNCHANGED)


def test_reject_regressive_policy_only_blocks_backward_moves() -> None:
    policy = TransitionPolicy.REJECT_REGRESSIVE

    assert transition_allowed(policy, TransitionKind.FORWARD)
    assert transition_allowed(policy, TransitionKind.LATERAL)
    assert not transition_allowed(policy, TransitionKind.REGRESSIVE)
