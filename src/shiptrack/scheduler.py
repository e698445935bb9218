"""Time-based trigger running the reconciliation job on a fixed cadence.

Runs are aligned to wall-clock boundaries in the configured timezone, so a
30 minute interval fires at :00 and :30 local time regardless of when the
process started.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from shiptrack.config import ScheduleConfig
    from shiptrack.domain.reconciliation import ReconciliationJob

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def next_run_after(now: datetime, interval_minutes: int, tz: ZoneInfo) -> datetime:
    """Return the first interval boundary strictly after ``now``."""

    if interval_minutes < 1:
        raise ValueError("Schedule interval must be at least one minute")
    local_now = now.astimezone(tz)
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed = local_now - midnight
    interval = timedelta(minutes=interval_minutes)
    return midnight + (elapsed // interval + 1) * interval


def run_schedule(
    job_factory: Callable[[], ReconciliationJob],
    config: ScheduleConfig,
    *,
    max_runs: int | None = None,
    clock: Callable[[], datetime] = _utcnow,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Run the job at each boundary until ``max_runs`` cycles have completed.

    A failing cycle is logged and the schedule continues with the next slot.
    Returns the number of cycles attempted.
    """

    log.info(
        "Polling carriers every %s minutes (%s)",
        config.interval_minutes,
        config.timezone.key,
    )
    runs = 0
    while max_runs is None or runs < max_runs:
        due = next_run_after(clock(), config.interval_minutes, config.timezone)
        log.debug("Next carrier poll at %s", due.isoformat())
        sleep(max((due - clock()).total_seconds(), 0.0))
        runs += 1
        try:
            summary = job_factory().run()
        except Exception:
            log.exception("Scheduled carrier poll failed")
            continue
        log.info("Scheduled carrier poll done: %s", summary.as_dict())
    return runs
