"""Unit tests for tools.yaml loading."""

from pathlib import Path

from reactAgent.tools import ToolConfig, ToolMeta, load_tool_config


class TestToolConfig:
    def test_packaged_config_covers_builtins(self):
        config = load_tool_config()
        for name in ("spawn_agent", "memory_store", "memory_recall"):
            assert config.overrides_for(name)["available_to_subagent"] is True

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ToolConfig(tmp_path / "missing.yaml")
        assert config.config == {}
        assert config.overrides_for("anything") == {}

    def test_file_overrides(self, tmp_path: Path):
        path = tmp_path / "tools.yaml"
        path.write_text(
            "tools:\n"
            "  write_file:\n"
            "    requires_confirmation: true\n"
            "    tags: [files]\n"
            "    unknown_field: ignored\n",
            encoding="utf-8",
        )
        config = load_tool_config(path)
        assert config.overrides_for("write_file") == {"requires_confirmation": True, "tags": ["files"]}

        meta = config.apply(ToolMeta(name="write_file"))
        assert meta.requires_confirmation
        assert meta.tags == ["files"]

    def test_tools_section_wins_over_builtin(self):
        config = ToolConfig(data={
            "builtin": {"x": {"description": "from builtin"}},
            "tools": {"x": {"description": "from tools"}},
        })
        assert config.overrides_for("x")["description"] == "from tools"
