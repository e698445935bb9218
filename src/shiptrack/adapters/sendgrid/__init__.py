"""SendGrid notification adapter."""

from __future__ import annotations

from .client import SendGridNotifier, build_mail_payload
from .message import RenderedMessage, render_status_change

__all__ = [
    "RenderedMessage",
    "SendGridNotifier",
    "build_mail_payload",
    "render_status_change",
]
