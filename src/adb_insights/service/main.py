"""Command-line runner for the dashboard data provider.

    python -m adb_insights.service.main [--config dashboard.yaml] [--ticks N] [--export csv|json]

Builds the service, logs every broadcast snapshot and runs until interrupted,
or until ``--ticks`` broadcasts have been delivered.
"""

import argparse
import os
import signal
import threading
from typing import Optional, Sequence

from dotenv import load_dotenv

from adb_insights.config.config import PROJECT_ROOT
from adb_insights.config.models import DashboardConfig
from adb_insights.config.schemas import DashboardSnapshot
from adb_insights.service.dashboard_service import DashboardService, build_dashboard_service
from adb_insights.service.export import EXPORT_FORMATS
from adb_insights.utils.logging import get_logger, setup_logging
from adb_insights.utils.text import format_currency, format_percentage

logger = get_logger(__name__)

shutdown_event = threading.Event()


def signal_handler(signum, frame):
    """Handle shutdown signals."""
    logger.info(f"Received signal {signum}, shutting down...")
    shutdown_event.set()


def log_snapshot(snapshot: DashboardSnapshot) -> None:
    m = snapshot.metrics
    logger.info(
        f"[team {snapshot.team_id}] revenue={format_currency(m.total_revenue)} "
        f"customers={m.new_customers} accounts={m.active_accounts} "
        f"growth={format_percentage(m.growth_rate)} active_users={m.active_users}"
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the ADB Insights dashboard data provider")
    parser.add_argument("--config", default=os.getenv("ADB_INSIGHTS_CONFIG"),
                        help="YAML file with a 'dashboard:' section")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    parser.add_argument("--ticks", type=int, default=None,
                        help="Stop after this many broadcasts")
    parser.add_argument("--export", choices=EXPORT_FORMATS, default=None,
                        help="Write one export before running")
    return parser.parse_args(argv)


def run(service: DashboardService, ticks: Optional[int] = None) -> int:
    """Start ``service`` and block until shutdown or ``ticks`` broadcasts.

    Returns:
        Number of snapshots received
    """
    received = 0
    done = threading.Event()

    def on_snapshot(snapshot: DashboardSnapshot) -> None:
        nonlocal received
        received += 1
        log_snapshot(snapshot)
        if ticks is not None and received >= ticks:
            done.set()

    unsubscribe = service.subscribe(on_snapshot)
    service.start()
    try:
        while not shutdown_event.is_set() and not done.is_set():
            done.wait(timeout=0.5)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        unsubscribe()
        service.stop()
    return received


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(PROJECT_ROOT / ".env")
    args = parse_args(argv)
    setup_logging(args.log_level, force=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    config = DashboardConfig.from_yaml(args.config)
    logger.info(f"Configuration: {config.__dict__}")
    service = build_dashboard_service(config)
    try:
        if args.export:
            path = service.export_data(args.export)
            logger.info(f"Wrote {path}")
        received = run(service, args.ticks)
        logger.info(f"Received {received} snapshot(s)")
    finally:
        service.close()
        logger.info("Service shutdown complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
