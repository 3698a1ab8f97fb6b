"""Unit Tests for the Tool Registry and Tool Selector"""

import json
import pytest
from unittest.mock import MagicMock

from c9ai.core.errors import ToolRegistryError
from c9ai.tools.base import ToolDescriptor, placeholders
from c9ai.tools.registry import ToolRegistry
from c9ai.tools.selector import ToolSelector, extract_json
from c9ai.core.errors import ParseFailure


@pytest.fixture
def registry(tmp_path):
    return ToolRegistry(tmp_path / "tools.json")


class TestDescriptor:
    def test_placeholders_become_parameters(self):
        tool = ToolDescriptor.from_template("greet", "echo {{greeting}} {{ name }} {{greeting}}")
        assert list(tool.parameters) == ["greeting", "name"]
        assert placeholders(tool.command) == ["greeting", "name"]

    @pytest.mark.parametrize("name", ["1bad", "bad-name", "", "has space"])
    def test_invalid_names(self, name):
        with pytest.raises(ToolRegistryError):
            ToolDescriptor.from_template(name, "echo hi")

    def test_render_missing_parameter(self):
        tool = ToolDescriptor.from_template("greet", "echo Hello {{name}}")
        assert tool.validate_args({}) == ["name"]
        with pytest.raises(ToolRegistryError) as exc_info:
            tool.render({}, "linux")
        assert "name" in str(exc_info.value)

    def test_render(self):
        tool = ToolDescriptor.from_template("greet", "echo Hello {{name}}")
        assert tool.render({"name": "Ada"}, "linux") == "echo Hello Ada"


class TestRegistry:
    def test_defaults_seeded(self, registry, tmp_path):
        """Test that a missing registry file is created with default tools"""
        assert (tmp_path / "tools.json").exists()
        assert registry.has("list_files")
        assert registry.has("git_status")
        data = json.loads((tmp_path / "tools.json").read_text())
        assert "{{tools}}" in data["tool_selection_prompt"]

    def test_register_and_reload(self, registry, tmp_path):
        tool = ToolDescriptor.from_template("greet", "echo Hello {{name}}", "Say hello")
        registry.register(tool)

        reloaded = ToolRegistry(tmp_path / "tools.json")
        assert reloaded.get("greet").to_dict() == tool.to_dict()

    def test_duplicate_rejected(self, registry):
        with pytest.raises(ToolRegistryError):
            registry.register(ToolDescriptor.from_template("git_status", "git status"))

    def test_edit_command_adds_parameters(self, registry):
        registry.register(ToolDescriptor.from_template("greet", "echo Hello {{name}}"))
        tool = registry.edit("greet", "command", "echo {{greeting}} {{name}}")
        assert set(tool.parameters) == {"greeting", "name"}

    def test_edit_platform_override(self, registry):
        registry.register(ToolDescriptor.from_template("greet", "echo Hello {{name}}"))
        registry.edit("greet", "platform.windows", "echo Hi {{name}}")
        tool = registry.get("greet")
        assert tool.render({"name": "Ada"}, "windows") == "echo Hi Ada"
        assert tool.render({"name": "Ada"}, "linux") == "echo Hello Ada"

    def test_edit_unknown_field(self, registry):
        with pytest.raises(ToolRegistryError):
            registry.edit("git_status", "colour", "blue")

    def test_default_platform_commands(self, registry):
        list_files = registry.get("list_files")
        assert list_files.render({"path": "src"}, "windows") == "dir src"
        assert list_files.render({}, "linux") == "ls -la"

    def test_remove(self, registry, tmp_path):
        registry.remove("git_status")
        assert not ToolRegistry(tmp_path / "tools.json").has("git_status")
        with pytest.raises(ToolRegistryError):
            registry.remove("git_status")


class TestSelector:
    def test_extract_json_from_fenced_block(self):
        raw = 'Sure!\n```json\n{"tool": "git_status", "parameters": {}}\n```'
        assert extract_json(raw)["tool"] == "git_status"

    def test_extract_json_invalid(self):
        with pytest.raises(ParseFailure):
            extract_json("no json here")

    def test_model_selection(self, registry):
        infer = MagicMock(return_value='{"tool": "find_files", "parameters": {"pattern": "*.py"}}')
        selection = ToolSelector(registry, infer).select("find python files")
        assert selection.name == "find_files"
        assert selection.parameters == {"pattern": "*.py"}
        assert selection.source == "model"

    def test_prompt_includes_tools_and_input(self, registry):
        prompt = ToolSelector(registry).build_prompt("show git status")
        assert "git_status" in prompt
        assert "User request: show git status" in prompt

    def test_model_declines(self, registry):
        infer = MagicMock(return_value='{"tool": null, "parameters": {}}')
        assert ToolSelector(registry, infer).select("make me a sandwich") is None

    def test_parse_failure_retried_once_then_pattern(self, registry):
        """Test that unparseable output is retried once before pattern matching"""
        infer = MagicMock(return_value="I think you want git status")
        selection = ToolSelector(registry, infer).select("git status")
        assert infer.call_count == 2
        assert selection.name == "git_status"
        assert selection.source == "pattern"

    def test_unknown_tool_counts_as_parse_failure(self, registry):
        infer = MagicMock(return_value='{"tool": "teleport", "parameters": {}}')
        selection = ToolSelector(registry, infer).select("disk usage")
        assert infer.call_count == 2
        assert selection.name == "disk_usage"

    def test_pattern_without_model(self, registry):
        selection = ToolSelector(registry).select("show disk space usage")
        assert selection.name == "disk_usage"
        assert selection.source == "pattern"

    def test_pattern_guesses_parameters(self, registry):
        selection = ToolSelector(registry).select_by_pattern('find files "*.md"')
        assert selection.name == "find_files"
        assert selection.parameters == {"pattern": "*.md"}
