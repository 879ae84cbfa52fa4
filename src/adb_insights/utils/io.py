import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


def maybe_load_yaml(path: Optional[str]) -> Dict[str, Any]:
    """Load YAML config file with fallback to empty dict."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return {}
    return loaded if isinstance(loaded, dict) else {}


def ensure_dir(path: str | Path) -> Path:
    """Ensure the directory exists and return the Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_text(filepath: Path, content: str) -> Path:
    """Write ``content`` through a temp file and rename it into place."""
    filepath = Path(filepath)
    ensure_dir(filepath.parent)
    temp_filepath = filepath.with_suffix(filepath.suffix + '.tmp')
    with open(temp_filepath, 'w', encoding='utf-8') as f:
        f.write(content)
    temp_filepath.replace(filepath)
    return filepath


def dump_json(payload: Any) -> str:
    """Pretty-print ``payload`` the way exports and stored state expect."""
    return json.dumps(payload, indent=2, ensure_ascii=False)
