"""Tool configuration loader."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from reactAgent.config.project_root import resolve_package_path

from .registry import ToolMeta

LOGGER = logging.getLogger(__name__)

DEFAULT_TOOLS_CONFIG = "config/tools.yaml"

_OVERRIDABLE = ("description", "requires_confirmation", "available_to_subagent", "tags")


class ToolConfig:
    """Tool metadata overrides loaded from YAML.

    Two sections are read:
    - ``builtin``: metadata overrides for the engine's own tools (registered in code)
    - ``tools``: per-tool overrides for domain tools (e.g. confirmation flags)
    """

    def __init__(self, config_path: Optional[Path] = None, data: Optional[Dict[str, Any]] = None):
        """
        Args:
            config_path: Path to tools.yaml configuration file
            data: Already-parsed configuration (takes precedence over the file)
        """
        self.config_path = config_path
        self.config = data if data is not None else self._load_config()

    def _load_config(self) -> dict:
        """Load and parse YAML configuration."""
        if self.config_path is None or not self.config_path.exists():
            LOGGER.warning(f"Tools config not found: {self.config_path}, using defaults")
            return {}

        with open(self.config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Tools config must be a mapping: {self.config_path}")
        LOGGER.info(f"Loaded tools configuration from {self.config_path}")
        return config

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.config.get(name) or {}
        return section if isinstance(section, dict) else {}

    def overrides_for(self, tool_name: str) -> Dict[str, Any]:
        """Merged overrides for one tool (``tools`` wins over ``builtin``)."""
        merged: Dict[str, Any] = {}
        for section in ("builtin", "tools"):
            entry = self._section(section).get(tool_name)
            if isinstance(entry, dict):
                merged.update({k: v for k, v in entry.items() if k in _OVERRIDABLE})
        return merged

    def apply(self, meta: ToolMeta) -> ToolMeta:
        """Return ``meta`` with configured overrides applied."""
        overrides = self.overrides_for(meta.name)
        if not overrides:
            return meta
        if "tags" in overrides:
            overrides["tags"] = list(overrides["tags"] or [])
        LOGGER.debug(f"Applying config overrides to {meta.name}: {sorted(overrides)}")
        return replace(meta, **overrides)


def load_tool_config(config_path: Optional[Path] = None) -> ToolConfig:
    """Load the tool configuration (defaults to the packaged tools.yaml)."""
    return ToolConfig(Path(config_path) if config_path else resolve_package_path(DEFAULT_TOOLS_CONFIG))
