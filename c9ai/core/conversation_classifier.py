"""Conversational vs actionable classification

Deterministic, local, no I/O. Decides whether free text that matched no
sigil or named command should be treated as a conversation or as a
command. Rules are evaluated in order and the first one that fires wins,
so command-intent patterns always beat conversational markers.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Tuple


@dataclass
class Classification:
    """Result of conversational/actionable classification"""
    actionable: bool
    rule: str


# ═══════════════════════════════════════════════════════════════════════════
# COMMAND INTENT PATTERNS - any match makes the input actionable
# ═══════════════════════════════════════════════════════════════════════════
COMMAND_INTENT_PATTERNS = [
    r"^(open|launch|list|show|check|search|create|delete|compile|execute|install)\b",
    r"\bdisk\s+(usage|space)\b",
    r"\bgit\s+status\b",
    r"\b(process|processes|file|files|directory|directories|folder|folders)\b",
]

# ═══════════════════════════════════════════════════════════════════════════
# CONVERSATIONAL PATTERNS
# ═══════════════════════════════════════════════════════════════════════════
CONVERSATIONAL_PATTERNS = [
    # Greetings
    r"^(hi|hello|hey|greetings|good\s+(morning|afternoon|evening))\b",
    r"^(how are you|what'?s up|how'?s it going)\b",
    # Capability questions
    r"^(what can you do|what do you do|can you help|how can you help)\b",
    r"\bcapabilit(y|ies)\b",
    # Thanks
    r"\b(thanks|thank you|thx)\b",
    # Identity
    r"\b(who|what) are you\b",
    # Modal questions
    r"^(can|could|would|should|will|do|does|is|are|did)\s+.*\?$",
    # Explanations
    r"^(explain|describe|tell me about)\b",
]

WH_WORDS = ("what", "why", "how", "when", "where", "who", "which")


def _singular(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith(("sses", "xes", "shes", "ches")):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


COMMAND_NOUNS = ("file", "folder", "directory", "process", "disk", "script", "app", "application", "command")

HEDGING_WORDS = ("generally", "really", "think", "feel", "believe")

SHORT_INPUT_LENGTH = 15


class ConversationClassifier:
    """Ordered rule table deciding conversational vs actionable input"""

    def __init__(self):
        self._command_patterns = [re.compile(p, re.IGNORECASE) for p in COMMAND_INTENT_PATTERNS]
        self._conversational_patterns = [re.compile(p, re.IGNORECASE) for p in CONVERSATIONAL_PATTERNS]

        # (rule name, predicate, actionable when the predicate fires)
        self.rules: List[Tuple[str, Callable[[str], bool], bool]] = [
            ("command_intent", self._matches_command_intent, True),
            ("conversational_pattern", self._matches_conversational, False),
            ("wh_question", self._is_wh_question, False),
            ("hedging", self._has_hedging, False),
            ("question_mark", lambda text: text.endswith("?"), False),
            ("short_input", lambda text: len(text) < SHORT_INPUT_LENGTH, False),
        ]

    def _matches_command_intent(self, text: str) -> bool:
        return any(p.search(text) for p in self._command_patterns)

    def _matches_conversational(self, text: str) -> bool:
        return any(p.search(text) for p in self._conversational_patterns)

    @staticmethod
    def _words(text: str) -> List[str]:
        return re.findall(r"[a-z']+", text.lower())

    def _is_wh_question(self, text: str) -> bool:
        words = self._words(text)
        if not words or words[0] not in WH_WORDS or not text.endswith("?"):
            return False
        return not any(_singular(word) in COMMAND_NOUNS for word in words)

    def _has_hedging(self, text: str) -> bool:
        return any(word in HEDGING_WORDS for word in self._words(text))

    def classify(self, text: str) -> Classification:
        text = text.strip()
        for name, predicate, actionable in self.rules:
            if predicate(text):
                return Classification(actionable=actionable, rule=name)
        return Classification(actionable=True, rule="default")

    def is_actionable(self, text: str) -> bool:
        return self.classify(text).actionable


# Global instance
_classifier = ConversationClassifier()


def is_actionable(text: str) -> bool:
    """Convenience function for classifying input"""
    return _classifier.is_actionable(text)
