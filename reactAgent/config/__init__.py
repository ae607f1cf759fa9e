"""Configuration exports."""

from .settings import (
    ContextSettings,
    GovernanceSettings,
    ModelSettings,
    ObservabilitySettings,
    Settings,
    get_settings,
)
from .project_root import get_package_root, resolve_package_path

__all__ = [
    "Settings",
    "ModelSettings",
    "GovernanceSettings",
    "ContextSettings",
    "ObservabilitySettings",
    "get_settings",
    "get_package_root",
    "resolve_package_path",
]
