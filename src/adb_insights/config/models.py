"""Configuration models and data structures."""

from dataclasses import dataclass
from typing import Optional

from adb_insights.config.config import (
    BROADCAST_INTERVAL_SEC,
    SIGNAL_REFRESH_INTERVAL_SEC,
    FETCH_TIMEOUT_SEC,
    LOCAL_STORAGE_PATH,
    EXPORT_DIR,
    PROJECT_ROOT,
)
from adb_insights.utils.io import maybe_load_yaml
from adb_insights.utils.path_utils import resolve_path


@dataclass
class DashboardConfig:
    """Dashboard provider configuration with YAML override support."""
    broadcast_interval_sec: float = BROADCAST_INTERVAL_SEC
    signal_refresh_interval_sec: float = SIGNAL_REFRESH_INTERVAL_SEC
    fetch_timeout_sec: float = FETCH_TIMEOUT_SEC
    storage_path: Optional[str] = str(LOCAL_STORAGE_PATH)  # None keeps state in memory
    export_dir: str = str(EXPORT_DIR)
    enable_external_signals: bool = True

    @classmethod
    def from_yaml(cls, yaml_path: Optional[str] = None) -> 'DashboardConfig':
        """Create config with optional YAML overrides from a ``dashboard:`` section.

        Relative ``storage_path`` and ``export_dir`` values are resolved against
        the project root.
        """
        yaml_config = maybe_load_yaml(yaml_path)
        section = yaml_config.get('dashboard', {})
        if not isinstance(section, dict):
            section = {}

        defaults = cls()
        return cls(
            broadcast_interval_sec=float(section.get('broadcast_interval_sec', defaults.broadcast_interval_sec)),
            signal_refresh_interval_sec=float(section.get('signal_refresh_interval_sec', defaults.signal_refresh_interval_sec)),
            fetch_timeout_sec=float(section.get('fetch_timeout_sec', defaults.fetch_timeout_sec)),
            storage_path=resolve_path(section.get('storage_path', defaults.storage_path), PROJECT_ROOT),
            export_dir=resolve_path(section.get('export_dir', defaults.export_dir), PROJECT_ROOT),
            enable_external_signals=bool(section.get('enable_external_signals', defaults.enable_external_signals)),
        )
