"""Recurring jobs that drive digests and reminders."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker

from taskflow.config import Settings
from taskflow.domain.entities import DigestFrequency
from taskflow.infrastructure.email import EmailSender, send_email
from taskflow.infrastructure.scheduler import RecurringJob, ScheduleTrigger

from .digest import run_digest
from .dispatcher import NotificationDispatcher
from .reminders import send_due_soon_reminders


def build_notification_jobs(
    settings: Settings,
    *,
    session_factory: sessionmaker[Session],
    dispatcher: NotificationDispatcher,
    send: EmailSender = send_email,
) -> list[RecurringJob]:
    """Return the digest and reminder jobs configured in ``settings``."""

    def _digest_job(frequency: DigestFrequency):
        def run(fire_time: datetime) -> None:
            with session_factory() as session:
                run_digest(session, frequency, now=fire_time, send=send)

        return run

    def _reminder_job(fire_time: datetime) -> None:
        with session_factory() as session:
            send_due_soon_reminders(
                session,
                dispatcher,
                today=fire_time.date(),
                horizon_days=settings.due_reminder_horizon_days,
            )

    return [
        RecurringJob(
            name="daily-digest",
            trigger=ScheduleTrigger.from_cron(settings.daily_digest_cron),
            run=_digest_job(DigestFrequency.DAILY),
        ),
        RecurringJob(
            name="weekly-digest",
            trigger=ScheduleTrigger.from_cron(settings.weekly_digest_cron),
            run=_digest_job(DigestFrequency.WEEKLY),
        ),
        RecurringJob(
            name="due-date-reminders",
            trigger=ScheduleTrigger.from_cron(settings.due_reminder_cron),
            run=_reminder_job,
        ),
    ]


__all__ = ["build_notification_jobs"]
