"""Base inference engine interface - all local engines implement this"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence


class BaseLLMProvider(ABC):
    """Abstract base class for local inference engines

    The session only relies on two things: the engine can be prepared for a
    model file, and given a prompt it returns text or raises.
    """

    def __init__(self, **kwargs):
        self.config = kwargs

    @abstractmethod
    def load(self, model_path: Path) -> None:
        """
        Prepare the engine to serve the given model file

        Raises:
            RuntimeError: If the engine is not available
        """
        raise NotImplementedError

    @abstractmethod
    def complete(
        self,
        prompt: str,
        max_tokens: int = 150,
        temperature: float = 0.7,
        stop: Optional[Sequence[str]] = None,
        repeat_penalty: float = 1.1,
    ) -> str:
        """
        Complete an already formatted prompt

        Returns:
            Raw generated text (may be empty)

        Raises:
            RuntimeError: If the call fails
        """
        raise NotImplementedError

    def check_available(self) -> bool:
        """Check if the engine can serve requests"""
        return True
