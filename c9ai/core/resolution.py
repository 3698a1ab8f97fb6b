"""Resolution results

Every resolver tier returns one of these instead of a prefixed string.
The text directives ("@action: ...", "@create: ...") only exist at the
edges: parsed from raw model output, rendered for todo annotations.
"""

from dataclasses import dataclass
from typing import Optional, Union

ACTION_PREFIX = "@action:"
CREATE_PREFIX = "@create:"


@dataclass(frozen=True)
class Action:
    verb: str
    target: str = ""

    def render(self) -> str:
        return f"{ACTION_PREFIX} {self.verb} {self.target}".rstrip()


@dataclass(frozen=True)
class CreateFile:
    name: str
    content: str

    def render(self) -> str:
        return f"{CREATE_PREFIX} {self.name}\n{self.content}"


@dataclass(frozen=True)
class Conversational:
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class Failure:
    kind: str
    detail: str
    suggestion: Optional[str] = None

    def render(self) -> str:
        if self.suggestion:
            return f"{self.detail}\n💡 {self.suggestion}"
        return self.detail


Resolution = Union[Action, CreateFile, Conversational, Failure]


def parse_action(text: str) -> Optional[Action]:
    """Parse '@action: verb target' (the directive may follow other text)"""
    index = text.find(ACTION_PREFIX)
    if index == -1:
        return None
    directive = text[index + len(ACTION_PREFIX):].strip().splitlines()
    if not directive or not directive[0].strip():
        return None
    parts = directive[0].strip().split(None, 1)
    verb = parts[0].lower()
    target = parts[1].strip() if len(parts) > 1 else ""
    return Action(verb, target)


def parse_model_output(text: str) -> Resolution:
    """Turn raw model text into a Resolution"""
    text = text.strip()
    if text.startswith(CREATE_PREFIX):
        header, _, body = text.partition("\n")
        name = header[len(CREATE_PREFIX):].strip()
        if name:
            return CreateFile(name, body)

    action = parse_action(text)
    if action is not None:
        return action

    return Conversational(text)
