"""Tool descriptors - user-registered command templates

A tool is a shell command template with {{param}} placeholders, an optional
per-OS override, and a parameter schema. Tools never run Python code.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.errors import ToolRegistryError

TOOL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
PLACEHOLDER_RE = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*\}\}")


@dataclass
class ToolParameter:
    type: str = "string"
    description: str = ""
    required: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "description": self.description, "required": self.required}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolParameter":
        return cls(
            type=data.get("type", "string"),
            description=data.get("description", ""),
            required=bool(data.get("required", True)),
        )


@dataclass
class ToolDescriptor:
    name: str
    description: str
    command: str
    platform_commands: Dict[str, str] = field(default_factory=dict)
    parameters: Dict[str, ToolParameter] = field(default_factory=dict)

    def __post_init__(self):
        if not TOOL_NAME_RE.match(self.name or ""):
            raise ToolRegistryError(
                f"Invalid tool name '{self.name}': use letters, digits and underscores, not starting with a digit"
            )

    @classmethod
    def from_template(cls, name: str, command: str, description: str = "") -> "ToolDescriptor":
        """Build a tool whose parameters are the placeholders found in the command"""
        parameters = {p: ToolParameter() for p in placeholders(command)}
        return cls(name=name, description=description or f"Runs: {command}", command=command, parameters=parameters)

    def command_for(self, family: str) -> str:
        return self.platform_commands.get(family, self.command)

    def validate_args(self, args: Dict[str, Any]) -> List[str]:
        """Return the names of missing required parameters"""
        return [
            name for name, param in self.parameters.items()
            if param.required and (args.get(name) is None or str(args.get(name)) == "")
        ]

    def render(self, args: Dict[str, Any], family: str) -> str:
        """Substitute {{param}} placeholders for the given OS family"""
        missing = self.validate_args(args)
        if missing:
            raise ToolRegistryError(f"Missing required parameter(s) for {self.name}: {', '.join(missing)}")

        def substitute(match):
            return str(args.get(match.group(1), ""))

        return PLACEHOLDER_RE.sub(substitute, self.command_for(family)).strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "command": self.command,
            "platform_commands": dict(self.platform_commands),
            "parameters": {name: p.to_dict() for name, p in self.parameters.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: Optional[str] = None) -> "ToolDescriptor":
        return cls(
            name=data.get("name", name),
            description=data.get("description", ""),
            command=data.get("command", ""),
            platform_commands=dict(data.get("platform_commands", {})),
            parameters={
                key: ToolParameter.from_dict(value)
                for key, value in data.get("parameters", {}).items()
            },
        )


def placeholders(command: str) -> List[str]:
    seen = []
    for name in PLACEHOLDER_RE.findall(command):
        if name not in seen:
            seen.append(name)
    return seen
