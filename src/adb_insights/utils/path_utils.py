from pathlib import Path
from typing import Optional, Union


def find_repo_root(start: Path | None = None, marker: str = "pyproject.toml") -> Path:
    """Walk upwards from ``start`` until a folder containing ``marker`` is found.

    Args:
        start: Optional starting path. Defaults to the location of this file.
        marker: Filename used to identify the repository root.

    Returns:
        The repository root, or the working directory for an installed package.
    """
    p = (start or Path(__file__).resolve()).parent
    for candidate in [p, *p.parents]:
        if (candidate / marker).exists():
            return candidate
    return Path.cwd()


def resolve_path(path: Optional[Union[str, Path]], root: Path) -> Optional[str]:
    """Anchor a relative config path at ``root``; ``None`` passes through."""
    if path is None:
        return None
    p = Path(path).expanduser()
    return str(p if p.is_absolute() else root / p)
