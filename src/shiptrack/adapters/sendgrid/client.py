"""Notifier backed by the SendGrid v3 mail-send API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from shiptrack.adapters.http_resilience import ResilientClient, default_client_factory
from shiptrack.domain.ports.notification import DeliveryOutcome, NotificationError

from .message import RenderedMessage, render_status_change

if TYPE_CHECKING:
    from collections.abc import Callable

    from shiptrack.config.http_resilience import ResilienceConfig
    from shiptrack.config.mail import MailConfig
    from shiptrack.domain.ports.notification import StatusChangeNotice

log = getLogger(__name__)

MAIL_SEND_PATH = "mail/send"


def build_mail_payload(sender: str, recipient: str, message: RenderedMessage) -> dict[str, object]:
    return {
        "personalizations": [{"to": [{"email": recipient}]}],
        "from": {"email": sender},
        "subject": message.subject,
        "content": [
            {"type": "text/plain", "value": message.text},
            {"type": "text/html", "value": message.html},
        ],
    }


class SendGridNotifier:
    """Send one status-change mail per call; never retries.

    Without a configured API key every call is skipped and logged.
    """

    def __init__(
        self,
        *,
        config: MailConfig | None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self.config = config
        self._client_factory = client_factory or default_client_factory
        self._client: ResilientClient | None = None

    async def notify(self, recipient: str, notice: StatusChangeNotice) -> DeliveryOutcome:
        config = self.config
        if config is None:
            log.warning(
                "Skipping email notification for %s because SendGrid API key is missing",
                notice.tracking_number,
            )
            return DeliveryOutcome.SKIPPED

        message = render_status_change(notice)
        payload = build_mail_payload(config.sender, recipient, message)
        if self._client is None:
            self._client = self._client_factory(config.resilience)
        try:
            response = await self._client.post(
                MAIL_SEND_PATH,
                json=payload,
                headers={"Authorization": f"Bearer {config.api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            log.error(
                "Failed to send email for %s to %s: %s",
                notice.tracking_number,
                recipient,
                exc,
            )
            raise NotificationError(f"SendGrid delivery failed: {exc}") from exc

        log.info("Sent status email for %s to %s", notice.tracking_number, recipient)
        return DeliveryOutcome.SENT

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()


if TYPE_CHECKING:
    from shiptrack.domain.ports.notification import Notifier

    _notifier_check: Notifier = SendGridNotifier(config=None)
