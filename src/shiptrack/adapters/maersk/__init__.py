"""Public interface for the Maersk carrier adapter."""

from __future__ import annotations

from .client import MaerskAdapter
from .schema import MaerskEvent, MaerskTrackingResponse
from .translator import MAERSK_STATUS_TABLE, translate_tracking

__all__ = [
    "MAERSK_STATUS_TABLE",
    "MaerskAdapter",
    "MaerskEvent",
    "MaerskTrackingResponse",
    "translate_tracking",
]
