"""SendGrid mail transport configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import NO_RETRY, ResilienceConfig

SENDGRID_BASE_URL = "https://api.sendgrid.com/v3/"
DEFAULT_MAIL_FROM = "no-reply@shiptrack.app"
MAIL_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class MailConfig:
    api_key: str
    sender: str
    resilience: ResilienceConfig


def get_mail_config(*, resilience: ResilienceConfig | None = None) -> MailConfig:
    values = require_env_vars(("SENDGRID_API_KEY",))
    sender = (os.getenv("MAIL_FROM") or "").strip() or DEFAULT_MAIL_FROM
    return MailConfig(
        api_key=values["SENDGRID_API_KEY"],
        sender=sender,
        resilience=resilience
        or ResilienceConfig(
            name="sendgrid",
            base_url=SENDGRID_BASE_URL,
            timeout_seconds=MAIL_TIMEOUT_SECONDS,
            retry=NO_RETRY,
        ),
    )
