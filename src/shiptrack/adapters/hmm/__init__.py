"""Public interface for the HMM carrier adapter."""

from __future__ import annotations

from .client import HmmAdapter
from .schema import HmmEvent, HmmTrackingResponse
from .translator import HMM_STATUS_TABLE, translate_tracking

__all__ = [
    "HMM_STATUS_TABLE",
    "HmmAdapter",
    "HmmEvent",
    "HmmTrackingResponse",
    "translate_tracking",
]
