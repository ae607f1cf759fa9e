"""Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and ensures proper test environment setup.
"""

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure project root is in PYTHONPATH for imports to work
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from reactAgent.config.settings import (  # noqa: E402
    ContextSettings,
    GovernanceSettings,
    ObservabilitySettings,
    Settings,
)
from tests.fakes import FakeClock  # noqa: E402


# ========== Fixtures ==========

@pytest.fixture
def make_settings():
    """Factory for isolated settings (no file logging, no planning by default)."""

    def _make(**governance: Any) -> Settings:
        values = {
            "max_steps": 10,
            "child_max_steps": 6,
            "max_depth": 2,
            "token_budget": 4000,
            "max_parallel": 4,
            "task_timeout": 60.0,
            "subtask_timeout": 30.0,
            "plan_first": False,
        }
        values.update(governance)
        return Settings(
            governance=GovernanceSettings(**values),
            context=ContextSettings(observation_max_tokens=200, chars_per_token=4, memory_preview_chars=2000),
            observability=ObservabilitySettings(log_dir=None),
        )

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def fake_clock():
    return FakeClock()
