"""Tool Registry - persisted catalog of user tools

This is the deterministic side of tool use - no AI here. The whole file is
rewritten after every add/edit/remove.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.errors import ToolRegistryError
from .base import ToolDescriptor, ToolParameter, placeholders

DEFAULT_SELECTION_PROMPT = """You are a tool selector. Pick the single best tool for the user's request.

Available tools:
{{tools}}

User request: {{input}}

Respond ONLY with JSON in this exact format:
{"tool": "<tool name>", "parameters": {"<param>": "<value>"}}
If no tool fits, respond with {"tool": null, "parameters": {}}"""


def default_tools() -> List[ToolDescriptor]:
    return [
        ToolDescriptor(
            name="list_files",
            description="List files in a directory",
            command="ls -la {{path}}",
            platform_commands={"windows": "dir {{path}}"},
            parameters={"path": ToolParameter(description="Directory to list", required=False)},
        ),
        ToolDescriptor(
            name="disk_usage",
            description="Show disk space usage",
            command="df -h",
            platform_commands={"windows": "wmic logicaldisk get size,freespace,caption"},
        ),
        ToolDescriptor(
            name="process_list",
            description="Show running processes",
            command="ps aux | head -20",
            platform_commands={"windows": "tasklist"},
        ),
        ToolDescriptor(
            name="git_status",
            description="Show git status of the current repository",
            command="git status --short --branch",
        ),
        ToolDescriptor(
            name="find_files",
            description="Find files by name pattern",
            command='find . -name "{{pattern}}" -not -path "*/.git/*"',
            platform_commands={"windows": 'dir /s /b "{{pattern}}"'},
            parameters={"pattern": ToolParameter(description="File name pattern, e.g. *.py")},
        ),
    ]


class ToolRegistry:
    """Central registry for user tools, backed by a JSON file"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._tools: Dict[str, ToolDescriptor] = {}
        self.selection_prompt = DEFAULT_SELECTION_PROMPT
        self.load()

    def load(self):
        """(Re)load tools from disk, seeding defaults when the file is missing"""
        self._tools = {}
        if not self.path.exists():
            for tool in default_tools():
                self._tools[tool.name] = tool
            self.selection_prompt = DEFAULT_SELECTION_PROMPT
            self.save()
            return

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ToolRegistryError(f"Cannot read tool registry {self.path}: {e}")

        self.selection_prompt = data.get("tool_selection_prompt") or DEFAULT_SELECTION_PROMPT
        for name, entry in data.get("tools", {}).items():
            try:
                self._tools[name] = ToolDescriptor.from_dict(entry, name=name)
            except ToolRegistryError as e:
                logging.warning(f"Skipping invalid tool '{name}': {e}")

        logging.info(f"Loaded {len(self._tools)} tools from {self.path}")

    def save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "tools": {name: tool.to_dict() for name, tool in self._tools.items()},
            "tool_selection_prompt": self.selection_prompt,
        }
        with open(self.path, 'w') as f:
            json.dump(data, f, indent=2)

    def register(self, tool: ToolDescriptor):
        """Add a new tool and persist"""
        if not isinstance(tool, ToolDescriptor):
            raise TypeError("Tool must be a ToolDescriptor")

        if tool.name in self._tools:
            raise ToolRegistryError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        self.save()
        logging.info(f"Registered tool: {tool.name}")

    def edit(self, name: str, field_name: str, value: str) -> ToolDescriptor:
        """Change description, command, or a platform command (platform.<os>)"""
        tool = self.get(name)
        if tool is None:
            raise ToolRegistryError(f"Tool '{name}' not found")

        if field_name == "description":
            tool.description = value
        elif field_name == "command":
            tool.command = value
            self._sync_parameters(tool)
        elif field_name.startswith("platform."):
            family = field_name.split(".", 1)[1]
            if value:
                tool.platform_commands[family] = value
            else:
                tool.platform_commands.pop(family, None)
            self._sync_parameters(tool)
        else:
            raise ToolRegistryError(f"Unknown field '{field_name}'. Use description, command or platform.<os>")

        self.save()
        logging.info(f"Edited tool {name}: {field_name}")
        return tool

    @staticmethod
    def _sync_parameters(tool: ToolDescriptor):
        """Add parameters for placeholders introduced by an edit"""
        templates = [tool.command, *tool.platform_commands.values()]
        for template in templates:
            for param in placeholders(template):
                tool.parameters.setdefault(param, ToolParameter())

    def remove(self, name: str):
        if name not in self._tools:
            raise ToolRegistryError(f"Tool '{name}' not found")
        del self._tools[name]
        self.save()
        logging.info(f"Removed tool: {name}")

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def list_all(self) -> Dict[str, Dict[str, Any]]:
        """List all registered tools with metadata"""
        return {name: tool.to_dict() for name, tool in self._tools.items()}

    def describe_for_llm(self) -> str:
        lines = []
        for tool in self._tools.values():
            params = ", ".join(
                f"{name}{'' if p.required else '?'}: {p.description or p.type}"
                for name, p in tool.parameters.items()
            )
            lines.append(f"- {tool.name}({params}): {tool.description}")
        return "\n".join(lines)
