"""Local model session

One session per process, created lazily and passed to whoever needs it.
State moves UNINITIALIZED -> READY (engine serving the model) or
UNINITIALIZED -> DEGRADED (model installed but engine unavailable; callers
use pattern matching instead). initialize() is idempotent.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from ..core.deadline import call_with_timeout
from ..core.errors import EmptyResponse, ModelNotInstalled
from .providers.base import BaseLLMProvider
from .templates import template_for

MODEL_EXTENSIONS = (".gguf", ".bin")


class SessionState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DEGRADED = "degraded"


def find_model_files(models_dir: Path) -> List[Path]:
    models_dir = Path(models_dir)
    if not models_dir.exists():
        return []
    return sorted(p for p in models_dir.iterdir() if p.is_file() and p.suffix.lower() in MODEL_EXTENSIONS)


def has_local_model(models_dir: Path) -> bool:
    return bool(find_model_files(models_dir))


class ModelSession:
    """Lazily initialized handle on the installed local model"""

    def __init__(
        self,
        models_dir: Path,
        provider: BaseLLMProvider,
        timeout: float = 30,
        max_tokens: int = 150,
        temperature: float = 0.7,
        repeat_penalty: float = 1.1,
    ):
        self.models_dir = Path(models_dir)
        self.provider = provider
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.repeat_penalty = repeat_penalty
        self.path: Optional[Path] = None
        self.state = SessionState.UNINITIALIZED

    @property
    def ready(self) -> bool:
        return self.state != SessionState.UNINITIALIZED

    @property
    def fallback_mode(self) -> bool:
        return self.state == SessionState.DEGRADED

    def initialize(self) -> SessionState:
        """Load the first installed model. Safe to call repeatedly."""
        if self.state != SessionState.UNINITIALIZED:
            return self.state

        model_files = find_model_files(self.models_dir)
        if not model_files:
            raise ModelNotInstalled()

        self.path = model_files[0]
        logging.info(f"Loading local model: {self.path.name}")
        try:
            self.provider.load(self.path)
            self.state = SessionState.READY
            logging.info(f"Local model ready: {self.path.name}")
        except RuntimeError as e:
            logging.warning(f"Inference engine unavailable ({e}), falling back to pattern matching")
            self.state = SessionState.DEGRADED
        return self.state

    def infer(self, prompt: str, max_tokens: Optional[int] = None, stop: Optional[Sequence[str]] = None) -> str:
        """Run one bounded inference on the real model.

        Raises InferenceTimeout past the deadline and EmptyResponse when the
        engine returns nothing.
        """
        if self.state != SessionState.READY:
            raise RuntimeError(f"Local model not available (state: {self.state.value})")

        template = template_for(self.path)
        text = call_with_timeout(
            self.provider.complete,
            self.timeout,
            template.render(prompt),
            max_tokens=max_tokens or self.max_tokens,
            temperature=self.temperature,
            stop=stop if stop is not None else template.stop,
            repeat_penalty=self.repeat_penalty,
        )
        text = (text or "").strip()
        if not text:
            raise EmptyResponse()
        return text
