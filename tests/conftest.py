"""Test configuration and shared fixtures."""

import random
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from adb_insights.data_pipeline.collectors.external_signals import SignalCache
from adb_insights.data_pipeline.generator import DashboardDataGenerator
from adb_insights.data_pipeline.scheduler import ManualScheduler
from adb_insights.data_pipeline.storage.local_storage import LocalStorage

# Monday, business hours
FIXED_NOW = datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def manual_scheduler():
    scheduler = ManualScheduler(start_time=FIXED_NOW)
    yield scheduler
    scheduler.shutdown()


@pytest.fixture
def memory_storage():
    storage = LocalStorage()
    yield storage
    storage.close()


@pytest.fixture
def generator(rng, fixed_clock):
    return DashboardDataGenerator(signal_source=SignalCache, rng=rng, clock=fixed_clock)


@pytest.fixture
def offline_session():
    """A session whose every request fails with a connection error."""
    session = Mock()
    session.get.side_effect = requests.ConnectionError("offline")
    return session
