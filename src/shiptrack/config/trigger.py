"""Trigger surface configuration: cron secret and polling schedule."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .env import env_int, require_env_var
from .errors import ConfigurationError

DEFAULT_SCHEDULE_INTERVAL_MINUTES = 30
DEFAULT_SCHEDULE_TIMEZONE = "Asia/Seoul"


@dataclass(frozen=True, slots=True)
class ScheduleConfig:
    interval_minutes: int = DEFAULT_SCHEDULE_INTERVAL_MINUTES
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo(DEFAULT_SCHEDULE_TIMEZONE))


def get_cron_secret() -> str:
    """Return the shared secret guarding the on-demand poll endpoint."""

    return require_env_var("CRON_SECRET")


def get_schedule_config() -> ScheduleConfig:
    tz_name = (os.getenv("SHIPTRACK_SCHEDULE_TIMEZONE") or "").strip()
    tz_name = tz_name or DEFAULT_SCHEDULE_TIMEZONE
    try:
        timezone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown schedule timezone: {tz_name}") from exc
    return ScheduleConfig(
        interval_minutes=env_int(
            "SHIPTRACK_SCHEDULE_INTERVAL_MINUTES", DEFAULT_SCHEDULE_INTERVAL_MINUTES
        ),
        timezone=timezone,
    )
