"""Timer driver for recurring background jobs (digests, reminders)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from anyio import to_thread

from taskflow.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

_WEEKDAY_NAMES = {
    "MON": 0,
    "TUE": 1,
    "WED": 2,
    "THU": 3,
    "FRI": 4,
    "SAT": 5,
    "SUN": 6,
}


@dataclass(frozen=True)
class ScheduleTrigger:
    """Fire once a day at ``hour:minute``, optionally only on ``weekday``.

    ``weekday`` follows :meth:`datetime.weekday` (Monday is 0).
    """

    hour: int
    minute: int = 0
    weekday: int | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Invalid hour {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"Invalid minute {self.minute}")
        if self.weekday is not None and not 0 <= self.weekday <= 6:
            raise ValueError(f"Invalid weekday {self.weekday}")

    @classmethod
    def from_cron(cls, expression: str) -> "ScheduleTrigger":
        """Parse a five-field cron expression such as ``0 9 * * MON``.

        Minute and hour must be fixed numbers; day-of-month and month must be
        ``*``; day-of-week may be ``*``, ``0``-``7`` (Sunday is 0 or 7) or a
        three-letter name.
        """

        parts = expression.split()
        if len(parts) != 5:
            raise ValueError(f"Expected 5 cron fields in {expression!r}")
        minute, hour, day_of_month, month, day_of_week = parts
        if day_of_month != "*" or month != "*":
            raise ValueError(f"Only daily or weekly schedules are supported: {expression!r}")
        try:
            return cls(
                hour=int(hour),
                minute=int(minute),
                weekday=_parse_weekday(day_of_week),
            )
        except ValueError as exc:
            raise ValueError(f"Invalid cron expression {expression!r}: {exc}") from exc

    def next_after(self, moment: datetime) -> datetime:
        """Return the first fire time strictly after ``moment``."""

        candidate = moment.replace(
            hour=self.hour, minute=self.minute, second=0, microsecond=0
        )
        if candidate <= moment:
            candidate += timedelta(days=1)
        if self.weekday is not None:
            while candidate.weekday() != self.weekday:
                candidate += timedelta(days=1)
        return candidate


def _parse_weekday(value: str) -> int | None:
    if value == "*":
        return None
    name = value.upper()
    if name in _WEEKDAY_NAMES:
        return _WEEKDAY_NAMES[name]
    number = int(value)
    if not 0 <= number <= 7:
        raise ValueError(f"day-of-week {value!r} out of range")
    return 6 if number in (0, 7) else number - 1


@dataclass(frozen=True)
class RecurringJob:
    """A job body invoked with the scheduled fire time."""

    name: str
    trigger: ScheduleTrigger
    run: Callable[[datetime], Any]


class JobScheduler:
    """Run each :class:`RecurringJob` on its own asyncio timer task.

    Job bodies execute in worker threads so a long digest never blocks the
    event loop that serves live channels.
    """

    def __init__(
        self,
        jobs: Sequence[RecurringJob],
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._jobs = list(jobs)
        self._clock = clock
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def jobs(self) -> list[RecurringJob]:
        return list(self._jobs)

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self) -> None:
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._run_forever(job), name=f"scheduler:{job.name}")
            for job in self._jobs
        ]
        logger.info("[scheduler] Started %s recurring jobs", len(self._tasks))

    async def stop(self) -> None:
        """Cancel the timers. A job body already running finishes first."""

        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info("[scheduler] Stopped recurring jobs")

    async def run_once(self, job: RecurringJob, fire_time: datetime) -> None:
        logger.info("[scheduler] Running %s for %s", job.name, fire_time.isoformat())
        try:
            await to_thread.run_sync(job.run, fire_time)
        except Exception:
            logger.exception("[scheduler] Error in %s run", job.name)

    async def _run_forever(self, job: RecurringJob) -> None:
        last_fire: datetime | None = None
        while True:
            now = self._clock()
            reference = now if last_fire is None or now > last_fire else last_fire
            fire_time = job.trigger.next_after(reference)
            delay = max((fire_time - now).total_seconds(), 0.0)
            logger.debug("[scheduler] %s sleeping %.0fs until %s", job.name, delay, fire_time)
            await asyncio.sleep(delay)
            await self.run_once(job, fire_time)
            last_fire = fire_time


__all__ = ["JobScheduler", "RecurringJob", "ScheduleTrigger"]
