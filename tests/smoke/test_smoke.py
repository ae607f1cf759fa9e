"""Smoke tests for quick validation.

Smoke tests are fast, critical-path tests that verify the system's basic functionality.
Run these before commits to catch obvious breakage.

Typical run time: < 10 seconds
"""

import pytest

from reactAgent.config import ModelSettings, Settings, get_package_root, resolve_package_path
from reactAgent.graph import PromptBuilder
from reactAgent.runtime import Orchestrator, build_application, build_chat_model
from reactAgent.schema import TaskStatus
from reactAgent.tools import BUILTIN_TOOL_NAMES, load_tool_config
from tests.fakes import ScriptedChatModel, calculator, done


class TestBasicSetup:
    """验证基础设置和配置"""

    def test_package_imports(self):
        import reactAgent

        assert reactAgent.__version__
        assert reactAgent.build_application is build_application

    def test_package_root(self):
        root = get_package_root()
        assert root.is_dir()
        assert (root / "config").is_dir()


class TestConfigFiles:
    """验证配置文件存在"""

    def test_tools_config_exists(self):
        path = resolve_package_path("config/tools.yaml")
        assert path.is_file(), "tools.yaml 应该存在"

    def test_builtin_tools_configured(self):
        config = load_tool_config()
        for name in BUILTIN_TOOL_NAMES:
            assert config.overrides_for(name)

    def test_templates_render(self):
        builder = PromptBuilder()
        system = builder.system_prompt(
            tools=[{"name": "calculator", "description": "Evaluate arithmetic.", "args": ["expression"]}],
            silent=True,
            can_spawn=False,
            depth=0,
            max_depth=2,
            step=1,
            max_steps=5,
            plan=["compute"],
        )
        assert "calculator" in system
        assert "silent mode" in system

        planner = builder.planner_prompt(tools=[], max_items=3)
        assert "## Planning" in planner


class TestApplication:
    """验证应用组装"""

    def test_build_application_registers_builtins(self, settings):
        orchestrator = build_application(model=ScriptedChatModel(), tools=[calculator], settings=settings)

        assert isinstance(orchestrator, Orchestrator)
        for name in (*BUILTIN_TOOL_NAMES, "calculator"):
            assert name in orchestrator.registry

    @pytest.mark.asyncio
    async def test_minimal_task(self, settings):
        orchestrator = build_application(model=ScriptedChatModel({"hello": [done("hi")]}), settings=settings)

        result = await orchestrator.run_task("hello")

        assert result.status == TaskStatus.DONE
        assert result.output == "hi"

    def test_default_chat_model(self):
        settings = Settings(model=ModelSettings(model_id="gpt-4o-mini", api_key="sk-test"))
        model = build_chat_model(settings)
        assert model.model_name == "gpt-4o-mini"

    def test_default_chat_model_requires_key(self):
        settings = Settings(model=ModelSettings(model_id="gpt-4o-mini", api_key=None))
        with pytest.raises(ValueError):
            build_chat_model(settings)
