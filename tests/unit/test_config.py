"""Tests for DashboardConfig defaults and YAML overrides."""

import tempfile
from pathlib import Path

from adb_insights.config import DashboardConfig
from adb_insights.config.config import PROJECT_ROOT
from adb_insights.utils.path_utils import resolve_path


def test_dashboard_config_defaults():
    config = DashboardConfig()
    assert config.broadcast_interval_sec == 10.0
    assert config.signal_refresh_interval_sec == 300.0
    assert config.fetch_timeout_sec == 5.0
    assert config.enable_external_signals is True
    assert config.storage_path.endswith("local_storage.db")


def test_dashboard_config_yaml_override():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write("""
dashboard:
  broadcast_interval_sec: 2
  fetch_timeout_sec: 1.5
  storage_path: null
  enable_external_signals: false
""")
        yaml_path = f.name

    try:
        config = DashboardConfig.from_yaml(yaml_path)
        assert config.broadcast_interval_sec == 2.0
        assert config.fetch_timeout_sec == 1.5
        assert config.signal_refresh_interval_sec == 300.0
        assert config.storage_path is None
        assert config.enable_external_signals is False
    finally:
        Path(yaml_path).unlink()


def test_dashboard_config_invalid_yaml():
    """Invalid YAML falls back to defaults."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write("invalid: yaml: content: [")
        yaml_path = f.name

    try:
        config = DashboardConfig.from_yaml(yaml_path)
        assert config == DashboardConfig()
    finally:
        Path(yaml_path).unlink()


def test_dashboard_config_ignores_other_sections():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write("runtime:\n  delta_hours: 3\ndashboard: not-a-mapping\n")
        yaml_path = f.name

    try:
        assert DashboardConfig.from_yaml(yaml_path) == DashboardConfig()
    finally:
        Path(yaml_path).unlink()


def test_dashboard_config_relative_paths_anchor_at_project_root():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write("dashboard:\n  storage_path: state/teams.db\n  export_dir: out\n")
        yaml_path = f.name

    try:
        config = DashboardConfig.from_yaml(yaml_path)
        assert config.storage_path == str(PROJECT_ROOT / "state" / "teams.db")
        assert config.export_dir == str(PROJECT_ROOT / "out")
    finally:
        Path(yaml_path).unlink()


def test_resolve_path_keeps_absolute_and_none(temp_data_dir):
    assert resolve_path(None, temp_data_dir) is None
    absolute = temp_data_dir / "x.db"
    assert resolve_path(absolute, Path("/elsewhere")) == str(absolute)
