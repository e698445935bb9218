"""Render status-change notices into mail content."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shiptrack.domain.ports.notification import StatusChangeNotice

DASHBOARD_HINT = "You can view full details in the ShipTrack dashboard."


@dataclass(frozen=True, slots=True)
class RenderedMessage:
    subject: str
    text: str
    html: str


def render_status_change(notice: StatusChangeNotice) -> RenderedMessage:
    carrier = str(notice.carrier).upper()
    rows = (
        ("Carrier", carrier),
        ("Tracking number", notice.tracking_number),
        ("Previous status", str(notice.previous_status)),
        ("Current status", str(notice.current_status)),
    )
    text_rows = [f"{label}: {value}" for label, value in rows]
    text = "\n".join(["New status update", "", *text_rows, "", DASHBOARD_HINT])
    html_rows = "\n".join(
        f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in rows
    )
    html = f"<h2>New status update</h2>\n{html_rows}\n<p>{DASHBOARD_HINT}</p>"
    return RenderedMessage(
        subject=f"Shipment {notice.tracking_number} status update",
        text=text,
        html=html,
    )
