"""Model-specific prompt formats"""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

SYSTEM_PROMPT = (
    "You are a helpful AI assistant that converts natural language into actionable commands. "
    "Always respond with @action: followed by the command."
)


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    format: str
    stop: Tuple[str, ...]

    def render(self, user_input: str, system: str = SYSTEM_PROMPT) -> str:
        return self.format.format(system=system, input=user_input)


PHI3 = PromptTemplate(
    name="phi-3",
    format="<|system|>{system}<|end|>\n<|user|>{input}<|end|>\n<|assistant|>",
    stop=("<|end|>", "\n\n"),
)

ZEPHYR = PromptTemplate(
    name="tinyllama",
    format="<|system|>\n{system}</s>\n<|user|>\n{input}</s>\n<|assistant|>\n",
    stop=("</s>", "\n\n"),
)

LLAMA2 = PromptTemplate(
    name="llama",
    format="[INST] <<SYS>>\n{system}\n<</SYS>>\n\n{input} [/INST]",
    stop=("[INST]", "\n\n"),
)


def template_for(model_path: Path) -> PromptTemplate:
    """Pick the prompt format from the model filename (Phi-3 by default)"""
    name = Path(model_path).name.lower()
    if "tinyllama" in name:
        return ZEPHYR
    if "llama" in name:
        return LLAMA2
    return PHI3
