"""Project root path detection - works regardless of working directory."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=1)
def get_package_root() -> Path:
    """Get absolute path to the ``reactAgent`` package directory.

    Example:
        >>> root = get_package_root()
        >>> templates = root / "config" / "prompt_templates"
    """
    # Go up: project_root.py -> config/ -> reactAgent/
    package_root = Path(__file__).resolve().parent.parent

    if not (package_root / "config").is_dir():
        raise RuntimeError(
            f"Could not locate package root. Expected 'config' directory under {package_root}"
        )

    return package_root


def resolve_package_path(relative_path: str | Path) -> Path:
    """Resolve a path relative to the package root.

    Example:
        >>> resolve_package_path("config/tools.yaml")
    """
    return get_package_root() / relative_path


__all__ = ["get_package_root", "resolve_package_path"]
