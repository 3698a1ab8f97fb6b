"""Retry/Fallback Supervisor

Escalation chain for natural-language resolution:
1. real local model (bounded retries, fixed delay between attempts)
2. pattern resolver
3. suggestion-only response
4. pointer to a cloud session (conversational input only)

Tier failures are logged, never shown. Only the Failure produced by the
last tier reaches the user.
"""

import time
import logging
from typing import Callable, Optional

from rapidfuzz import fuzz, process

from .errors import InferenceError, ModelNotInstalled, UnrecognizedInput
from .pattern_resolver import PatternResolver
from .resolution import Failure, Resolution, parse_model_output

NAMED_COMMANDS = [
    "claude", "gemini", "switch", "todos", "add", "analytics", "tools", "models",
    "scan", "issues", "achieve", "goal", "config", "help", "logo", "banner",
]

FUZZY_THRESHOLD = 75

# keyword -> suggested command, checked in order
KEYWORD_SUGGESTIONS = [
    (("list", "show"), 'Try: "todos list"'),
    (("add", "create"), 'Try: "todos add <task>"'),
    (("model",), 'Try: "models list"'),
    (("help",), 'Try: "help"'),
]


def suggest_command(text: str) -> Optional[str]:
    """Suggest a named command for text that nothing could resolve"""
    lower = text.lower().strip()
    if not lower:
        return None

    first_word = lower.split()[0]
    match = process.extractOne(first_word, NAMED_COMMANDS, scorer=fuzz.ratio)
    if match and match[1] >= FUZZY_THRESHOLD and first_word != match[0]:
        return f'Did you mean "{match[0]}"?'

    for keywords, suggestion in KEYWORD_SUGGESTIONS:
        if any(keyword in lower for keyword in keywords):
            return suggestion
    return None


class FallbackSupervisor:
    """Runs resolution tiers in order until one produces a result"""

    def __init__(
        self,
        resolver: PatternResolver,
        session=None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.resolver = resolver
        self.session = session
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.sleep = sleep

    def model_available(self) -> bool:
        """Initialize the session on first use; True when the real model can be called"""
        if self.session is None:
            return False
        try:
            self.session.initialize()
        except ModelNotInstalled:
            return False
        return not self.session.fallback_mode

    def infer_with_retries(self, prompt: str) -> str:
        """Call the real model up to max_retries times"""
        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                return self.session.infer(prompt)
            except (InferenceError, RuntimeError) as e:
                last_error = e
                logging.warning(f"Local AI attempt {attempt}/{self.max_retries} failed: {e}")
                if attempt < self.max_retries:
                    self.sleep(self.retry_delay)
        raise InferenceError(f"Local AI failed after {self.max_retries} attempts: {last_error}")

    def resolve(self, text: str, conversational: bool = False) -> Resolution:
        """Resolve free text to a Resolution, escalating through the tiers"""
        # Tier 1: real model
        if self.model_available():
            try:
                return parse_model_output(self.infer_with_retries(text))
            except InferenceError as e:
                logging.warning(f"Escalating to pattern matching: {e}")

        # Tier 2: pattern resolver
        suggestion = None
        try:
            return self.resolver.resolve(text)
        except UnrecognizedInput as e:
            suggestion = e.suggestion
            logging.info(f"Pattern resolver found no match for: {text}")
        except InferenceError as e:
            logging.warning(f"Pattern resolver failed: {e}")

        # Tier 3: suggestion only
        command_hint = suggest_command(text)
        if not conversational:
            return Failure(
                kind="unrecognized",
                detail=f'I\'m not sure what you mean by "{text}".',
                suggestion=command_hint or suggestion,
            )

        # Tier 4: cloud pointer
        return Failure(
            kind="needs_cloud",
            detail="I can't answer that locally.",
            suggestion=f"Try: @claude {text}",
        )
