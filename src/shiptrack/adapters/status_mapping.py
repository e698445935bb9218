"""Map carrier-native status strings onto ``ShipmentStatus``."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from shiptrack.domain.model import ShipmentStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

_SEPARATORS = re.compile(r"[\s\-_/]+")


def status_key(raw: str) -> str:
    """Normalise ``raw`` to an upper-case, underscore-separated lookup key."""

    return _SEPARATORS.sub("_", raw.strip()).strip("_").upper()


def build_status_table(
    entries: Mapping[ShipmentStatus, tuple[str, ...]],
) -> dict[str, ShipmentStatus]:
    table: dict[str, ShipmentStatus] = {}
    for status, raw_values in entries.items():
        for raw in raw_values:
            table[status_key(raw)] = status
    return table


def map_carrier_status(
    raw: str | None,
    table: Mapping[str, ShipmentStatus],
) -> ShipmentStatus | None:
    """Return the ``ShipmentStatus`` for ``raw`` or ``None`` if it is unknown."""

    if raw is None or not raw.strip():
        return None
    key = status_key(raw)
    mapped = table.get(key)
    if mapped is not None:
        return mapped
    try:
        return ShipmentStatus(key.lower())
    except ValueError:
        return None
