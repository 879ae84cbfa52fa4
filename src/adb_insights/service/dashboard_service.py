"""Dashboard service: the composition root for the data provider.

Wires the team context, snapshot generator, external signal fetcher and
broadcaster onto one interval scheduler. Consumers hold a
:class:`DashboardService` instance built by :func:`build_dashboard_service`.
"""

import random
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import requests

from adb_insights.config.models import DashboardConfig
from adb_insights.config.schemas import DashboardSnapshot, TrafficPoint
from adb_insights.data_pipeline.collectors.external_signals import ExternalSignalFetcher, SignalCache
from adb_insights.data_pipeline.generator import DashboardDataGenerator
from adb_insights.data_pipeline.scheduler import APSchedulerScheduler, IntervalScheduler
from adb_insights.data_pipeline.storage.local_storage import LocalStorage
from adb_insights.service.broadcaster import Subscriber, SubscriptionBroadcaster
from adb_insights.service.export import filter_traffic, write_export
from adb_insights.teams.context import Team, TeamContext
from adb_insights.utils.datetime import date_range_preset
from adb_insights.utils.logging import get_logger

logger = get_logger(__name__)


class DashboardService:
    """Public entry point used by dashboard consumers."""

    def __init__(
        self,
        config: DashboardConfig,
        scheduler: IntervalScheduler,
        teams: TeamContext,
        generator: DashboardDataGenerator,
        broadcaster: SubscriptionBroadcaster,
        fetcher: Optional[ExternalSignalFetcher] = None,
    ):
        self.config = config
        self.scheduler = scheduler
        self.teams = teams
        self.generator = generator
        self.broadcaster = broadcaster
        self.fetcher = fetcher
        self.is_running = False
        self._remove_team_listener = teams.add_listener(self._on_team_changed)

    def _on_team_changed(self, team: Team) -> None:
        """Push a snapshot for the newly selected team without waiting for the next tick."""
        logger.info(f"Team changed to {team.name}, regenerating")
        self.broadcaster.publish(self.generator.generate(team.id))

    def current_team_id(self) -> str:
        return self.teams.selected_team.id

    def get_initial_data(self, team_id: Optional[str] = None) -> DashboardSnapshot:
        """Snapshot for ``team_id``, or for the selected team when omitted."""
        return self.generator.generate(team_id if team_id is not None else self.current_team_id())

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self.broadcaster.subscribe(callback)

    def get_connection_status(self) -> bool:
        """True when any external signal has been cached."""
        return self.fetcher is not None and self.fetcher.has_signal()

    def signals(self) -> SignalCache:
        return self.fetcher.signals() if self.fetcher is not None else SignalCache()

    def test_connectivity(self) -> Dict[str, bool]:
        if self.fetcher is None:
            return {}
        return self.fetcher.test_connectivity()

    def export_data(self, fmt: str = "csv", directory: Optional[str] = None) -> Path:
        """Generate a fresh snapshot and write it as ``dashboard-data.<fmt>``."""
        snapshot = self.get_initial_data()
        return write_export(snapshot, fmt, directory or self.config.export_dir)

    def traffic_for_preset(self, preset: str, today: Optional[date] = None) -> Tuple[TrafficPoint, ...]:
        """Traffic points of a fresh snapshot within a named date range."""
        snapshot = self.get_initial_data()
        reference = today or datetime.fromisoformat(snapshot.generated_at).date()
        start, end = date_range_preset(preset, reference)
        return filter_traffic(snapshot, start, end)

    def start(self) -> None:
        if self.is_running:
            logger.warning("Dashboard service already running")
            return
        self.is_running = True
        self.scheduler.start()
        if self.fetcher is not None:
            self.fetcher.start()
        self.broadcaster.start()
        logger.info("Dashboard service started")

    def stop(self) -> None:
        if not self.is_running:
            return
        self.is_running = False
        self.broadcaster.stop()
        if self.fetcher is not None:
            self.fetcher.stop()
        self.scheduler.shutdown()
        logger.info("Dashboard service stopped")

    def close(self) -> None:
        """Stop timers, detach from the team context and release storage."""
        self.stop()
        self._remove_team_listener()
        self.teams.storage.close()


def build_dashboard_service(
    config: Optional[DashboardConfig] = None,
    scheduler: Optional[IntervalScheduler] = None,
    session: Optional[requests.Session] = None,
    rng: Optional[random.Random] = None,
    storage: Optional[LocalStorage] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> DashboardService:
    """Construct a fully wired service. Nothing runs until ``start()``."""
    config = config or DashboardConfig()
    scheduler = scheduler or APSchedulerScheduler()
    if storage is None:
        storage = LocalStorage(Path(config.storage_path) if config.storage_path else None)

    fetcher = None
    if config.enable_external_signals:
        fetcher = ExternalSignalFetcher(
            scheduler=scheduler,
            session=session,
            timeout=config.fetch_timeout_sec,
            refresh_interval=config.signal_refresh_interval_sec,
        )

    teams = TeamContext(storage)
    generator = DashboardDataGenerator(
        signal_source=fetcher.signals if fetcher is not None else None,
        rng=rng,
        clock=clock,
    )
    broadcaster = SubscriptionBroadcaster(
        generator,
        scheduler=scheduler,
        team_supplier=lambda: teams.selected_team.id,
        interval=config.broadcast_interval_sec,
    )
    return DashboardService(config, scheduler, teams, generator, broadcaster, fetcher)
