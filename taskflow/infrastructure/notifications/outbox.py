"""Fire-and-forget email delivery on a worker pool."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from taskflow.infrastructure.email import EmailMessage, EmailSender, send_email

logger = logging.getLogger(__name__)


class EmailOutbox:
    """Send emails in background threads so callers never wait on SendGrid.

    Failures are logged and dropped; nothing is retried.
    """

    def __init__(self, sender: EmailSender = send_email, *, max_workers: int = 4) -> None:
        self._sender = sender
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="taskflow-email"
        )

    def submit(self, message: EmailMessage) -> Future[bool]:
        return self._executor.submit(self._deliver, message)

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _deliver(self, message: EmailMessage) -> bool:
        try:
            delivered = bool(
                self._sender(message.subject, message.html_content, message.recipient)
            )
        except Exception:
            logger.exception("Email '%s' to %s failed", message.subject, message.recipient)
            return False
        if not delivered:
            logger.warning(
                "Email '%s' to %s was not delivered", message.subject, message.recipient
            )
        return delivered


__all__ = ["EmailOutbox"]
