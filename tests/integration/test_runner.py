"""Tests for the command-line runner."""

import random
import threading

from adb_insights.config import DashboardConfig
from adb_insights.data_pipeline.scheduler import ManualScheduler
from adb_insights.service import build_dashboard_service
from adb_insights.service import main as runner


def test_parse_args_defaults(monkeypatch):
    monkeypatch.delenv("ADB_INSIGHTS_CONFIG", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    args = runner.parse_args([])
    assert args.config is None
    assert args.log_level == "INFO"
    assert args.ticks is None
    assert args.export is None


def test_parse_args_reads_environment(monkeypatch):
    monkeypatch.setenv("ADB_INSIGHTS_CONFIG", "dashboard.yaml")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    args = runner.parse_args(["--ticks", "2", "--export", "json"])
    assert args.config == "dashboard.yaml"
    assert args.log_level == "DEBUG"
    assert args.ticks == 2
    assert args.export == "json"


def test_run_stops_after_requested_ticks():
    scheduler = ManualScheduler()
    config = DashboardConfig(storage_path=None, enable_external_signals=False)
    service = build_dashboard_service(config, scheduler=scheduler, rng=random.Random(1))

    finished = threading.Event()

    def drive():
        while not finished.is_set():
            if service.broadcaster.is_running:
                scheduler.advance(10)
            finished.wait(0.01)

    driver = threading.Thread(target=drive, daemon=True)
    driver.start()
    try:
        assert runner.run(service, ticks=3) >= 3
    finally:
        finished.set()
        driver.join(timeout=5)
        service.close()
    assert not service.is_running
