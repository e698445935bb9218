"""Idempotent merge of carrier-observed events into a stored timeline."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shiptrack.domain.model import TrackingEvent


def missing_events(
    existing_ids: Iterable[str],
    new_events: Iterable[TrackingEvent],
) -> tuple[TrackingEvent, ...]:
    """Return the events of ``new_events`` whose id is not in ``existing_ids``.

    Repeated ids inside ``new_events`` collapse onto their first occurrence.
    """

    seen = set(existing_ids)
    fresh: list[TrackingEvent] = []
    for event in new_events:
        if event.id in seen:
            continue
        seen.add(event.id)
        fresh.append(event)
    return tuple(fresh)


def merge_events(
    existing_events: Iterable[TrackingEvent],
    new_events: Iterable[TrackingEvent],
) -> tuple[TrackingEvent, ...]:
    """Return the events that must be written to bring the timeline up to date.

    Existing events are never altered or removed; replaying the same batch any
    number of times converges on the same stored set.
    """

    return missing_events((event.id for event in existing_events), new_events)


def merged_timeline(
    existing_events: Iterable[TrackingEvent],
    new_events: Iterable[TrackingEvent],
) -> tuple[TrackingEvent, ...]:
    """Union of both collections, ordered by event timestamp."""

    existing = tuple(existing_events)
    return sort_timeline(existing + merge_events(existing, new_events))


def sort_timeline(events: Iterable[TrackingEvent]) -> tuple[TrackingEvent, ...]:
    return tuple(sorted(events, key=_timeline_key))


def _timeline_key(event: TrackingEvent) -> tuple[int, datetime, str]:
    parsed = parse_event_timestamp(event.timestamp)
    if parsed is None:
        return (1, datetime.max.replace(tzinfo=UTC), event.id)
    return (0, parsed, event.id)


def parse_event_timestamp(value: str | None) -> datetime | None:
    """Parse a carrier ISO 8601 timestamp, treating naive values as UTC."""

    if not value:
        return None
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
