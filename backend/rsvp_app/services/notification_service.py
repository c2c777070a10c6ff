"""Host notification for new RSVPs.

Responsibilities:
- Summarise a submission (adult / child / total counts, numbered party list)
- Render it as a plain-text + HTML email
- Deliver over SMTP to the host address
- ``dispatch_rsvp_notification`` is the fire-and-forget entry point: it is
  scheduled after the response and only ever logs its outcome.
"""
import html
import logging
import smtplib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any, Optional, Sequence

import pytz

from rsvp_app.config import Settings
from rsvp_app.models.rsvp import AttendeeAge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RSVPSummary:
    primary_guest: str
    adults: int
    children: int
    total: int
    lines: list[str] = field(default_factory=list)
    guest_email: Optional[str] = None

    @property
    def listing(self) -> str:
        return "\n".join(self.lines)


def build_rsvp_summary(primary_guest: str, attendees: Sequence[Any], guest_email: Optional[str] = None) -> RSVPSummary:
    """Count the party (primary guest counted as an adult) and number each member."""
    party = [(primary_guest, AttendeeAge.adult)] + [(a.name, AttendeeAge(a.age)) for a in attendees]
    children = sum(1 for _, age in party if age == AttendeeAge.child)
    lines = [
        f"{i}. {name} ({'Child' if age == AttendeeAge.child else 'Adult'})"
        for i, (name, age) in enumerate(party, start=1)
    ]
    return RSVPSummary(
        primary_guest=primary_guest,
        adults=len(party) - children,
        children=children,
        total=len(party),
        lines=lines,
        guest_email=guest_email,
    )


class EmailNotifier:
    """Sends RSVP summaries to the host over SMTP."""

    def __init__(
        self,
        host: str,
        recipient: str,
        sender: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        tz_name: str = "UTC",
        event_name: str = "",
        event_details: Optional[dict[str, str]] = None,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.recipient = recipient
        self.tz_name = tz_name
        self.event_name = event_name
        self.event_details = event_details or {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailNotifier":
        details = {
            "Date": settings.EVENT_DATE,
            "Time": settings.EVENT_TIME,
            "Location": settings.EVENT_LOCATION,
        }
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
            sender=settings.EMAIL_FROM,
            recipient=settings.HOST_EMAIL,
            tz_name=settings.HOST_TIMEZONE,
            event_name=settings.EVENT_NAME,
            event_details={k: v for k, v in details.items() if v},
        )

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.recipient)

    def _submitted_at(self, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        try:
            tz = pytz.timezone(self.tz_name)
        except pytz.UnknownTimeZoneError:
            logger.warning("Unknown HOST_TIMEZONE %r, falling back to UTC", self.tz_name)
            tz = pytz.utc
        return now.astimezone(tz).strftime("%Y-%m-%d %H:%M %Z")

    def build_message(self, summary: RSVPSummary, now: Optional[datetime] = None) -> EmailMessage:
        submitted_at = self._submitted_at(now)
        title = f"{self.event_name} RSVP" if self.event_name else "RSVP"

        text_lines = [
            f"New RSVP from {summary.primary_guest}",
            "",
            f"Total guests: {summary.total}",
            f"Adults: {summary.adults}",
            f"Children: {summary.children}",
        ]
        if summary.guest_email:
            text_lines.append(f"Contact: {summary.guest_email}")
        text_lines += ["", "Attending party:", summary.listing]
        if self.event_details:
            text_lines += [""] + [f"{k}: {v}" for k, v in self.event_details.items()]
        text_lines += ["", f"Submitted at: {submitted_at}"]

        esc = html.escape
        party_html = "<br/>".join(esc(line) for line in summary.lines)
        details_html = "".join(
            f"<p><strong>{esc(k)}:</strong> {esc(v)}</p>" for k, v in self.event_details.items()
        )
        contact_html = f"<p>{esc(summary.guest_email)}</p>" if summary.guest_email else ""
        html_body = (
            "<html><body>"
            f"<h1>New RSVP Received</h1>"
            f"<h3>Primary Guest</h3><p><strong>{esc(summary.primary_guest)}</strong></p>{contact_html}"
            f"<p>Total Guests: {summary.total} &middot; Adults: {summary.adults} &middot; "
            f"Children: {summary.children}</p>"
            f"<h3>Attending Party</h3><p>{party_html}</p>"
            f"{details_html}"
            f"<p><small>Submitted at: {esc(submitted_at)}</small></p>"
            "</body></html>"
        )

        msg = EmailMessage()
        msg["Subject"] = f"New RSVP from {summary.primary_guest}"
        msg["From"] = formataddr((title, self.sender))
        msg["To"] = self.recipient
        if summary.guest_email:
            msg["Reply-To"] = summary.guest_email
        msg.set_content("\n".join(text_lines))
        msg.add_alternative(html_body, subtype="html")
        return msg

    def send_rsvp_notification(self, summary: RSVPSummary) -> None:
        """Deliver one summary. Raises on SMTP failure."""
        if not self.enabled:
            logger.warning("Notifications disabled (SMTP_HOST / HOST_EMAIL unset); skipping %s", summary.primary_guest)
            return
        msg = self.build_message(summary)
        with smtplib.SMTP(self.host, self.port, timeout=10) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(msg)


def dispatch_rsvp_notification(notifier: Any, summary: RSVPSummary) -> None:
    """Background task body: send and log. Failures never reach the caller."""
    try:
        notifier.send_rsvp_notification(summary)
        logger.info("RSVP notification sent for %s", summary.primary_guest)
    except Exception:
        logger.exception("RSVP notification failed for %s", summary.primary_guest)
