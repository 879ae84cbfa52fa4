"""Periodic snapshot fan-out to subscribed consumers."""

import itertools
import threading
from typing import Callable, Dict, Optional

from adb_insights.config.config import BROADCAST_INTERVAL_SEC
from adb_insights.config.schemas import DashboardSnapshot
from adb_insights.data_pipeline.generator import DashboardDataGenerator
from adb_insights.data_pipeline.scheduler import IntervalScheduler
from adb_insights.utils.logging import get_logger

logger = get_logger(__name__)

BROADCAST_JOB_ID = "broadcast_snapshot"

Subscriber = Callable[[DashboardSnapshot], None]


class SubscriptionBroadcaster:
    """Holds subscriber callbacks and publishes generated snapshots to them.

    ``publish`` copies the subscriber table before delivering, so callbacks
    may subscribe or unsubscribe (themselves or others) mid-delivery without
    affecting the current pass.
    """

    def __init__(
        self,
        generator: DashboardDataGenerator,
        scheduler: Optional[IntervalScheduler] = None,
        team_supplier: Optional[Callable[[], Optional[str]]] = None,
        interval: float = BROADCAST_INTERVAL_SEC,
    ):
        self.generator = generator
        self.scheduler = scheduler
        self.team_supplier = team_supplier or (lambda: None)
        self.interval = interval
        self._subscribers: Dict[int, Subscriber] = {}
        self._tokens = itertools.count()
        self._lock = threading.Lock()
        self.is_running = False
        self.last_snapshot: Optional[DashboardSnapshot] = None

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; the returned function unsubscribes it and is idempotent."""
        with self._lock:
            token = next(self._tokens)
            self._subscribers[token] = callback

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe

    def publish(self, snapshot: DashboardSnapshot) -> int:
        """Deliver ``snapshot`` to every subscriber registered when the pass begins.

        Returns:
            Number of callbacks that completed without raising
        """
        with self._lock:
            subscribers = list(self._subscribers.values())

        delivered = 0
        for callback in subscribers:
            try:
                callback(snapshot)
                delivered += 1
            except Exception as e:
                logger.error(f"Subscriber callback failed: {e}")
        self.last_snapshot = snapshot
        return delivered

    def tick(self) -> DashboardSnapshot:
        """Generate a snapshot for the current team and publish it."""
        snapshot = self.generator.generate(self.team_supplier())
        delivered = self.publish(snapshot)
        logger.debug(f"Broadcast snapshot to {delivered} subscriber(s)")
        return snapshot

    def start(self) -> None:
        if self.is_running:
            logger.warning("Broadcaster already running")
            return
        self.is_running = True
        if self.scheduler is not None:
            self.scheduler.add_interval_job(
                self.tick, self.interval, BROADCAST_JOB_ID, name="Dashboard broadcast"
            )
        logger.info(f"Broadcasting every {self.interval}s")

    def stop(self) -> None:
        self.is_running = False
        if self.scheduler is not None:
            self.scheduler.remove_job(BROADCAST_JOB_ID)
        logger.info("Broadcaster stopped")
