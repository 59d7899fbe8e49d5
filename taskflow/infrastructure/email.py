"""Utility helpers for sending transactional email notifications via SendGrid."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from html import escape
from typing import Any, Callable
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from taskflow.config import get_settings

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "[TaskFlow]"

EmailSender = Callable[[str, str, str], bool]


@dataclass(frozen=True)
class EmailMessage:
    """A rendered email ready to be handed to the sender."""

    recipient: str
    subject: str
    html_content: str


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                field = item.get("field")
                if message and field:
                    messages.append(f"{field}: {message}")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_failure(source: Any, *, recipient: str) -> None:
    """Log a failed SendGrid call from an exception or an unsuccessful response."""

    status_code = getattr(source, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(source, "body", None))

    if status_code and details:
        logger.error(
            "SendGrid rejected email to %s with status %s: %s",
            recipient,
            status_code,
            details,
        )
    elif status_code:
        logger.error("SendGrid rejected email to %s with status %s", recipient, status_code)
    elif details:
        logger.error("SendGrid request for %s failed: %s", recipient, details)
    else:
        logger.error("Error sending email to %s via SendGrid: %s", recipient, source)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email to %s", recipient)
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        _log_sendgrid_failure(exc, recipient=recipient)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(response, recipient=recipient)
        return False

    logger.info("Email '%s' sent to %s", subject, recipient)
    return True


def build_recipient_link(link: str | None, *, recipient_id: int, base_url: str) -> str:
    """Return an absolute ``link`` tagged with the recipient identifier."""

    target = urljoin(base_url.rstrip("/") + "/", (link or "").lstrip("/"))
    parts = urlsplit(target)
    query = [(key, value) for key, value in parse_qsl(parts.query) if key != "recipientId"]
    query.append(("recipientId", str(recipient_id)))
    return urlunsplit(parts._replace(query=urlencode(query)))


def render_notification_email(
    *, recipient: str, title: str, message: str, link: str
) -> EmailMessage:
    """Build the immediate email that accompanies a notification.

    ``message`` is already HTML produced by the event helpers.
    """

    html_content = "".join(
        (
            "<div style='font-family: sans-serif;'>",
            "<h2>TaskFlow notification</h2>",
            "<div style='border-left: 3px solid #007bff; padding-left: 15px; margin: 15px 0;'>",
            f"<p>{message}</p>",
            "</div>",
            f"<a href=\"{escape(link, quote=True)}\" style='display: inline-block; padding: 10px 15px; "
            "background-color: #007bff; color: white; text-decoration: none; border-radius: 5px;'>"
            "View details</a>",
            "</div>",
        )
    )
    return EmailMessage(
        recipient=recipient,
        subject=f"{SUBJECT_PREFIX} New notification: {title}",
        html_content=html_content,
    )


__all__ = [
    "EmailMessage",
    "EmailSender",
    "SUBJECT_PREFIX",
    "build_recipient_link",
    "render_notification_email",
    "send_email",
]
