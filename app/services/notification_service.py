"""Reminder notification senders.

``SmtpReminderSender`` delivers email over SMTP; ``LogReminderSender`` only
logs and is used when no mail server is configured. Neither catches delivery
errors: they propagate to the workflow step that called them.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from flask import current_app

from app.domain.clock import parse_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderMessage:
    subject: str
    body: str


def build_reminder_message(label: str, subscription: dict) -> ReminderMessage:
    """Render the subject and plain-text body for one reminder."""
    renewal = parse_timestamp(subscription["renewal_date"])
    user_name = (subscription.get("user") or {}).get("name") or "there"
    subject = f"Reminder: your {subscription['name']} subscription renews soon ({label})"
    body = (
        f"Hi {user_name},\n\n"
        f"Your {subscription['name']} subscription renews on "
        f"{renewal.strftime('%B %d, %Y')}.\n\n"
        f"Plan: {subscription['name']}\n"
        f"Price: {subscription['price']:.2f} {subscription['currency']}"
        f" ({subscription.get('frequency') or 'one-off'})\n"
        f"Payment method: {subscription['payment_method']}\n\n"
        "If you no longer need it, cancel before the renewal date.\n"
    )
    return ReminderMessage(subject=subject, body=body)


class LogReminderSender:
    """Writes reminders to the log instead of delivering them."""

    def send(self, recipient: str, label: str, subscription: dict) -> None:
        message = build_reminder_message(label, subscription)
        logger.info("Reminder to=%s subject='%s'", recipient, message.subject)


class SmtpReminderSender:
    """Delivers reminders as plain-text email over SMTP."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        sender: str = "reminders@subtracker.local",
        timeout: float = 20.0,
    ):
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._sender = sender
        self._timeout = timeout

    def send(self, recipient: str, label: str, subscription: dict) -> None:
        rendered = build_reminder_message(label, subscription)
        email = EmailMessage()
        email["Subject"] = rendered.subject
        email["From"] = self._sender
        email["To"] = recipient
        email.set_content(rendered.body)

        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            if self._use_tls:
                server.starttls()
            if self._username:
                server.login(self._username, self._password)
            server.send_message(email)
        logger.info("Reminder email sent to=%s label='%s'", recipient, label)


def build_sender(config=None) -> LogReminderSender | SmtpReminderSender:
    """Pick a sender from app config: SMTP when ``MAIL_SERVER`` is set."""
    config = config if config is not None else current_app.config
    if not config.get("MAIL_SERVER"):
        return LogReminderSender()
    return SmtpReminderSender(
        host=config["MAIL_SERVER"],
        port=config.get("MAIL_PORT", 587),
        username=config.get("MAIL_USERNAME", ""),
        password=config.get("MAIL_PASSWORD", ""),
        use_tls=config.get("MAIL_USE_TLS", True),
        sender=config.get("MAIL_DEFAULT_SENDER", "reminders@subtracker.local"),
    )
