"""Prompt template builder for the step loop.

Templates are Jinja2 files under ``config/prompt_templates`` rendered in a
sandboxed environment.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from jinja2.sandbox import SandboxedEnvironment

from reactAgent.config.project_root import resolve_package_path
from reactAgent.context import DROPPED_NOTICE


class PromptBuilder:
    """Loads and renders the system and planner prompts."""

    TEMPLATE_DIR = "config/prompt_templates"
    SYSTEM_TEMPLATE = f"{TEMPLATE_DIR}/system.jinja2"
    PLANNER_TEMPLATE = f"{TEMPLATE_DIR}/planner.jinja2"

    def __init__(self) -> None:
        self._env = SandboxedEnvironment(trim_blocks=True, lstrip_blocks=True)
        self._cache: Dict[str, Any] = {}

    @staticmethod
    def _load_template(template_path: str) -> str:
        """Read a template file relative to the package root."""
        full_path = resolve_package_path(template_path)
        with open(full_path, "r", encoding="utf-8") as f:
            return f.read()

    def _render(self, template_path: str, params: dict) -> str:
        template = self._cache.get(template_path)
        if template is None:
            template = self._env.from_string(self._load_template(template_path))
            self._cache[template_path] = template
        return template.render(**params).strip()

    def system_prompt(
        self,
        *,
        tools: List[Dict[str, Any]],
        silent: bool,
        can_spawn: bool,
        depth: int,
        max_depth: int,
        step: int,
        max_steps: int,
        plan: List[str],
        memory: str = "",
    ) -> str:
        return self._render(self.SYSTEM_TEMPLATE, {
            "tools": tools,
            "silent": silent,
            "can_spawn": can_spawn,
            "depth": depth,
            "max_depth": max_depth,
            "step": step,
            "max_steps": max_steps,
            "plan": plan,
            "memory": memory,
        })

    def planner_prompt(self, *, tools: List[str], max_items: int = 8) -> str:
        return self._render(self.PLANNER_TEMPLATE, {"tools": tools, "max_items": max_items})


def render_memory(snapshot: Dict[str, Any], max_chars: int) -> str:
    """Compact JSON rendering of a memory snapshot for the prompt."""
    if not snapshot or max_chars <= 0:
        return ""
    text = json.dumps(snapshot, ensure_ascii=False, default=str, sort_keys=True)
    if len(text) > max_chars:
        text = text[:max_chars] + " ... (truncated)"
    return text


def render_task(description: str, dropped: int = 0) -> str:
    text = f"Task: {description}"
    if dropped:
        text = f"{text}\n\n{DROPPED_NOTICE}"
    return text
