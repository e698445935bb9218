"""Ports for notifying shipment owners."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shiptrack.domain.model import Carrier, ShipmentStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class StatusChangeNotice:
    carrier: Carrier
    tracking_number: str
    previous_status: ShipmentStatus
    current_status: ShipmentStatus


class DeliveryOutcome(StrEnum):
    SENT = "sent"
    SKIPPED = "skipped"


class NotificationError(RuntimeError):
    """Raised when the mail transport rejects or fails to deliver a message."""


@runtime_checkable
class Notifier(Protocol):
    """Deliver a status-change notice to one recipient, at most once."""

    async def notify(self, recipient: str, notice: StatusChangeNotice) -> DeliveryOutcome: ...

    async def aclose(self) -> None: ...
