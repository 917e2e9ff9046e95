"""Email digest of new listings, sent through Gmail SMTP."""

import asyncio
import html
import logging
import os
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Sequence
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from ..models.listing import Listing
from .base import Notifier

logger = logging.getLogger(__name__)

VIENNA = ZoneInfo("Europe/Vienna")

LISTING_START = "<!--LISTING_START-->"
LISTING_END = "<!--LISTING_END-->"

EMAIL_TEMPLATE = """<!DOCTYPE html>
<html lang="de">
<head><meta charset="utf-8"><title>Neue private Immobilien</title></head>
<body style="font-family: Arial, sans-serif; color: #222; max-width: 640px; margin: 0 auto;">
  <h2 style="color: #0a4b78;">{{COUNT}} neue private Immobilien auf Willhaben</h2>
  <p style="color: #777; font-size: 12px;">Gesendet am {{SENT_AT}} {{TIMEZONE}}</p>
  <!--LISTING_START-->
  <div style="padding: 12px 0;">
    <h3 style="margin: 0 0 6px 0;"><a href="{{URL}}" style="color: #0a4b78;">{{TITLE}}</a></h3>
    <p style="margin: 0; font-size: 18px; font-weight: bold;">{{PRICE}}</p>
    <p style="margin: 4px 0;">{{LOCATION}}</p>
    <p style="margin: 4px 0; color: #555;">Typ: {{PROPERTY_TYPE}} &middot; Fläche: {{SIZE}} m&sup2; &middot; Zimmer: {{ROOMS}}</p>
  </div>
  <hr style="border: none; border-top: 1px solid #ddd;" />
  <!--LISTING_END-->
</body>
</html>
"""


class EmailSettings(BaseModel):
    """SMTP credentials and recipient."""

    sender: str = Field(..., description="Gmail address used to log in and send")
    app_password: str = Field(..., description="Gmail app password")
    recipient: str = Field(..., description="Where the digest goes")
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_timeout_seconds: float = 120.0
    sender_name: str = "Willhaben Scraper"

    @classmethod
    def from_env(cls) -> "EmailSettings":
        """Read GMAIL_ADDRESS, GMAIL_APP_PASSWORD and RECIPIENT_EMAIL from the environment.

        Raises:
            ValueError: If any of them is missing or empty.
        """
        names = ("GMAIL_ADDRESS", "GMAIL_APP_PASSWORD", "RECIPIENT_EMAIL")
        values = {name: os.environ.get(name) for name in names}
        missing = [name for name, value in values.items() if not value]
        if missing:
            raise ValueError(f"Missing configuration: set {', '.join(missing)} in environment or .env")
        return cls(
            sender=values["GMAIL_ADDRESS"],
            app_password=values["GMAIL_APP_PASSWORD"],
            recipient=values["RECIPIENT_EMAIL"],
        )


def _or_dash(value: str) -> str:
    return value if value and value != "0" else "-"


def _render_listing(block: str, listing: Listing) -> str:
    replacements = {
        "{{TITLE}}": listing.title,
        "{{PRICE}}": listing.price,
        "{{LOCATION}}": listing.location,
        "{{URL}}": listing.url,
        "{{PROPERTY_TYPE}}": listing.property_type or "-",
        "{{SIZE}}": _or_dash(listing.size),
        "{{ROOMS}}": _or_dash(listing.rooms),
    }
    for placeholder, value in replacements.items():
        block = block.replace(placeholder, html.escape(value))
    return block


def render_digest(
    listings: Sequence[Listing],
    sent_at: datetime | None = None,
    template: str = EMAIL_TEMPLATE,
) -> str:
    """Render the HTML body for a batch of listings.

    The block between the LISTING markers is repeated once per listing; the
    separator <hr /> of the last block is dropped.
    """
    sent_at = (sent_at or datetime.now(VIENNA)).astimezone(VIENNA)

    start = template.find(LISTING_START)
    end = template.find(LISTING_END)
    if start < 0 or end < 0:
        before, block, after = template, "", ""
    else:
        end += len(LISTING_END)
        before, block, after = template[:start], template[start:end], template[end:]

    rendered = [_render_listing(block, listing) for listing in listings]
    if rendered:
        last = rendered[-1]
        hr_index = last.rfind("<hr")
        if hr_index >= 0:
            hr_end = last.find("/>", hr_index)
            if hr_end >= 0:
                rendered[-1] = last[:hr_index] + last[hr_end + 2:]

    body = before + "".join(rendered) + after
    return (
        body.replace("{{SENT_AT}}", sent_at.strftime("%Y-%m-%d %H:%M:%S"))
        .replace("{{TIMEZONE}}", sent_at.tzname() or "")
        .replace("{{COUNT}}", str(len(listings)))
    )


class EmailNotifier(Notifier):
    """Sends one HTML email per batch of new listings."""

    def __init__(self, settings: EmailSettings):
        self.settings = settings

    def build_message(self, listings: Sequence[Listing]) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = f"{len(listings)} neue private Immobilien auf Willhaben"
        msg["From"] = formataddr((self.settings.sender_name, self.settings.sender))
        msg["To"] = self.settings.recipient
        msg.attach(MIMEText(render_digest(listings), "html", "utf-8"))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(
            self.settings.smtp_host,
            self.settings.smtp_port,
            timeout=self.settings.smtp_timeout_seconds,
        ) as server:
            server.ehlo()
            server.starttls()
            server.login(self.settings.sender, self.settings.app_password)
            server.sendmail(self.settings.sender, [self.settings.recipient], msg.as_string())

    async def send(self, listings: Sequence[Listing]) -> None:
        if not listings:
            return

        msg = self.build_message(listings)
        logger.info(f"Sending email to {self.settings.recipient}...")
        await asyncio.to_thread(self._deliver, msg)
        logger.info(f"Email sent with {len(listings)} new listing(s)")
