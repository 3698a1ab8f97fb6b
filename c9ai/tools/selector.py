"""Tool Selector - free text -> (tool name, parameters)

First asks the local model to answer with JSON; a response that cannot be
parsed gets exactly one retry. After that (or when no model is available)
tools are matched by fuzzy comparison against their names and descriptions.
"""

import re
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from rapidfuzz import fuzz

from ..core.errors import InferenceError, ParseFailure
from .base import ToolDescriptor
from .registry import ToolRegistry

PATTERN_MATCH_THRESHOLD = 60
MAX_PARSE_ATTEMPTS = 2


@dataclass
class ToolSelection:
    name: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    source: str = "model"


def extract_json(raw_response: str) -> Dict[str, Any]:
    """Pull the first JSON object out of model output"""
    if "```json" in raw_response:
        json_str = raw_response.split("```json")[1].split("```")[0].strip()
    elif "```" in raw_response:
        json_str = raw_response.split("```")[1].split("```")[0].strip()
    elif "{" in raw_response and "}" in raw_response:
        start = raw_response.find("{")
        end = raw_response.rfind("}") + 1
        json_str = raw_response[start:end]
    else:
        json_str = raw_response.strip()

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Invalid JSON response: {e}\nRaw response: {raw_response[:200]}")

    if not isinstance(data, dict):
        raise ParseFailure(f"Expected a JSON object, got: {type(data).__name__}")
    return data


class ToolSelector:
    """Selects a registered tool for a request"""

    def __init__(self, registry: ToolRegistry, infer: Optional[Callable[[str], str]] = None):
        self.registry = registry
        self.infer = infer

    def build_prompt(self, text: str) -> str:
        return (
            self.registry.selection_prompt
            .replace("{{tools}}", self.registry.describe_for_llm())
            .replace("{{input}}", text)
        )

    def _parse_selection(self, raw: str) -> Optional[ToolSelection]:
        data = extract_json(raw)
        name = data.get("tool")
        if name is None:
            return None
        if not isinstance(name, str) or not self.registry.has(name):
            raise ParseFailure(f"Model selected unknown tool: {name}")
        parameters = data.get("parameters") or {}
        if not isinstance(parameters, dict):
            raise ParseFailure("Tool parameters must be a JSON object")
        return ToolSelection(name=name, parameters=parameters, source="model")

    def select_with_model(self, text: str) -> Optional[ToolSelection]:
        """Ask the model; raises ParseFailure after the retry is used up"""
        prompt = self.build_prompt(text)
        last_error: Optional[ParseFailure] = None
        for attempt in range(1, MAX_PARSE_ATTEMPTS + 1):
            raw = self.infer(prompt)
            try:
                return self._parse_selection(raw)
            except ParseFailure as e:
                last_error = e
                logging.warning(f"Tool selection parse failed (attempt {attempt}/{MAX_PARSE_ATTEMPTS}): {e}")
        raise last_error

    def select_by_pattern(self, text: str) -> Optional[ToolSelection]:
        """Fuzzy-match the request against tool names and descriptions"""
        lower = text.lower()
        best: Optional[ToolDescriptor] = None
        best_score = 0.0
        for name in self.registry.list_all():
            tool = self.registry.get(name)
            haystack = f"{tool.name.replace('_', ' ')} {tool.description}".lower()
            score = max(
                fuzz.token_set_ratio(lower, haystack),
                fuzz.partial_ratio(tool.name.replace('_', ' '), lower),
            )
            if score > best_score:
                best, best_score = tool, score

        if best is None or best_score < PATTERN_MATCH_THRESHOLD:
            return None
        logging.info(f"Pattern-selected tool {best.name} (score {best_score:.0f})")
        return ToolSelection(name=best.name, parameters=self._guess_parameters(best, text), source="pattern")

    @staticmethod
    def _guess_parameters(tool: ToolDescriptor, text: str) -> Dict[str, Any]:
        """Fill parameters from key=value pairs, quoted strings, then the last word"""
        params: Dict[str, Any] = dict(re.findall(r"(\w+)=(\S+)", text))
        quoted = re.findall(r"['\"]([^'\"]+)['\"]", text)
        remaining = [name for name in tool.parameters if name not in params]
        for name in remaining:
            if quoted:
                params[name] = quoted.pop(0)
        remaining = [name for name in tool.parameters if name not in params and tool.parameters[name].required]
        words = text.split()
        if len(remaining) == 1 and len(words) > 1:
            params[remaining[0]] = words[-1]
        return {k: v for k, v in params.items() if k in tool.parameters}

    def select(self, text: str) -> Optional[ToolSelection]:
        if self.infer is not None:
            try:
                return self.select_with_model(text)
            except (ParseFailure, InferenceError, RuntimeError) as e:
                logging.warning(f"Model tool selection failed, using pattern matching: {e}")
        return self.select_by_pattern(text)
