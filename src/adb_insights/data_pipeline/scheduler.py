"""Interval scheduling for the broadcast and signal-refresh timers.

Two interchangeable implementations:
- APSchedulerScheduler: real timers on an APScheduler BackgroundScheduler
- ManualScheduler: virtual time advanced explicitly, used by tests and demos
"""

import heapq
import itertools
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from adb_insights.utils.datetime import utc_now
from adb_insights.utils.logging import get_logger

logger = get_logger(__name__)


class IntervalScheduler(ABC):
    """Runs callables on fixed intervals and exposes the matching clock."""

    @abstractmethod
    def add_interval_job(self, func: Callable[[], None], seconds: float, job_id: str, name: str = "") -> None:
        """Schedule ``func`` every ``seconds``; replaces an existing job with the same id."""

    @abstractmethod
    def remove_job(self, job_id: str) -> None:
        """Remove a job; unknown ids are ignored."""

    @abstractmethod
    def has_job(self, job_id: str) -> bool:
        pass

    @abstractmethod
    def start(self) -> None:
        pass

    @abstractmethod
    def shutdown(self) -> None:
        pass

    def now(self) -> datetime:
        """Current time as seen by jobs scheduled here."""
        return utc_now()


class APSchedulerScheduler(IntervalScheduler):
    """Interval scheduler backed by an APScheduler ``BackgroundScheduler``."""

    def __init__(self, scheduler: Optional[BackgroundScheduler] = None):
        self.scheduler = scheduler or BackgroundScheduler(timezone=timezone.utc)
        self.scheduler.add_listener(self._job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    def add_interval_job(self, func, seconds, job_id, name=""):
        self.scheduler.add_job(
            func=func,
            trigger=IntervalTrigger(seconds=seconds),
            id=job_id,
            name=name or job_id,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        logger.info(f"Scheduled {job_id} every {seconds}s")

    def remove_job(self, job_id):
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            logger.debug(f"Job {job_id} was not scheduled")

    def has_job(self, job_id):
        return self.scheduler.get_job(job_id) is not None

    def start(self):
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Interval scheduler started")

    def shutdown(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Interval scheduler stopped")

    def _job_listener(self, event):
        """Listen to job execution events."""
        if event.exception:
            logger.error(f"Job {event.job_id} failed: {event.exception}")
        else:
            logger.debug(f"Job {event.job_id} executed successfully")


class ManualScheduler(IntervalScheduler):
    """Deterministic scheduler whose clock only moves when :meth:`advance` is called.

    Jobs fire in due-time order; jobs due at the same instant fire in the order
    they were queued. A job that raises is logged and keeps its schedule.
    """

    def __init__(self, start_time: Optional[datetime] = None):
        self._now = start_time or datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)
        self._jobs: Dict[str, Tuple[Callable[[], None], timedelta, int]] = {}
        self._queue: List[Tuple[datetime, int, str, int]] = []
        self._seq = itertools.count()
        self.running = False

    def now(self) -> datetime:
        return self._now

    def add_interval_job(self, func, seconds, job_id, name=""):
        interval = timedelta(seconds=seconds)
        token = next(self._seq)
        self._jobs[job_id] = (func, interval, token)
        heapq.heappush(self._queue, (self._now + interval, token, job_id, token))

    def remove_job(self, job_id):
        self._jobs.pop(job_id, None)

    def has_job(self, job_id):
        return job_id in self._jobs

    def start(self):
        self.running = True

    def shutdown(self):
        self.running = False

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing every job that falls due.

        Returns:
            Number of job runs performed
        """
        target = self._now + timedelta(seconds=seconds)
        runs = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, job_id, token = heapq.heappop(self._queue)
            job = self._jobs.get(job_id)
            if job is None or job[2] != token:
                continue  # removed or replaced since it was queued
            func, interval, _ = job
            self._now = due
            heapq.heappush(self._queue, (due + interval, next(self._seq), job_id, token))
            if not self.running:
                continue
            try:
                func()
            except Exception as e:
                logger.error(f"Job {job_id} failed: {e}")
            runs += 1
        self._now = target
        return runs
