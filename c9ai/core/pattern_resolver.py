"""Pattern-to-Intent Resolver

Local stand-in for the language model: maps free text to a Resolution using
an ordered rule table. The first rule whose predicate matches wins, so the
order of RULES is part of the behaviour ("open" shadows "search", etc.).
"""

import re
import logging
from typing import Callable, List, Optional, Tuple

from .code_templates import generate_code
from .deadline import call_with_timeout
from .errors import UnrecognizedInput
from .resolution import Action, Conversational, CreateFile, Resolution

GREETING_TEXT = (
    "Hello! I'm C9 AI. I can help you with tasks like:\n"
    "• \"open excel\" - Open applications\n"
    "• \"list files\" - Show directory contents\n"
    "• \"search for X\" - Web search\n"
    "• \"compile document\" - Build projects\n"
    "What can I help you with?"
)

WELLBEING_TEXT = "I'm doing great! Ready to help you be more productive. What task would you like me to help with?"

THANKS_TEXT = "You're welcome! Happy to help. Is there anything else you need assistance with?"

CAPABILITIES_TEXT = (
    "I can help you with:\n"
    "• Opening applications: \"open excel\", \"open browser\"\n"
    "• File operations: \"list files\", \"show directory\"\n"
    "• Searching: \"search for tutorials\"\n"
    "• System info: \"check disk usage\", \"show processes\"\n"
    "• Code generation: \"create a program to calculate compound interest\"\n"
    "• Development: \"compile document\", \"run script\"\n\n"
    "Try any of these commands!"
)

EXIT_TEXT = 'To exit C9AI, type "exit" or "quit". To close an application, try "close [app name]".'

# Keyword -> application alias, checked in order
APP_KEYWORDS = [
    (("excel", "spreadsheet"), "excel"),
    (("word", "document"), "word"),
    (("browser", "chrome", "firefox"), "chrome"),
    (("code", "vscode", "editor"), "code"),
    (("terminal", "command"), "terminal"),
    (("calculator", "calc"), "calculator"),
    (("notes", "notepad"), "notepad"),
]

GREETING_RE = re.compile(r"^(hi|hello|hey|greetings|good morning|good afternoon|good evening)$")
WELLBEING_RE = re.compile(r"^(how are you|what's up|how's it going)$")
HELP_RE = re.compile(r"^(help|what can you do|commands|options)$")


def _has(text: str, *words: str) -> bool:
    return any(word in text for word in words)


def suggestion_for(text: str) -> str:
    """Keyword-driven hint shown when nothing matched"""
    if _has(text, "excel", "spreadsheet"):
        return 'Try: "open excel"'
    if _has(text, "file", "document"):
        return 'Try: "list files" or "open document"'
    if _has(text, "search", "find"):
        return 'Try: "search for [topic]"'
    if "help" in text:
        return 'Try: "help" for available commands'
    return 'Try commands like: "open excel", "list files", "search for tutorials", or "help"'


# ═══════════════════════════════════════════════════════════════════════════
# RULE HANDLERS - receive the lowercased text and the original prompt
# ═══════════════════════════════════════════════════════════════════════════

def _open_app(text: str, prompt: str) -> Resolution:
    for keywords, app in APP_KEYWORDS:
        if _has(text, *keywords):
            return Action("open", app)
    match = re.search(r"open\s+(.+)", text)
    return Action("open", match.group(1).strip() if match else "file")


def _search(text: str, prompt: str) -> Resolution:
    match = re.search(r"\bsearch\s+(?:for\s+)?(.+)", text)
    return Action("search", match.group(1).strip() if match else "tutorial")


def _find(text: str, prompt: str) -> Resolution:
    match = re.search(r"find\s+(.+)", text)
    return Action("search", match.group(1).strip() if match else "information")


def _compile(text: str, prompt: str) -> Resolution:
    return Action("compile", "research_paper.tex" if "research" in text else "document.tex")


def _run(text: str, prompt: str) -> Resolution:
    match = re.search(r"\brun\s+(.+)", text)
    return Action("run", match.group(1).strip() if match else "script.sh")


def _create(text: str, prompt: str) -> Resolution:
    if _has(text, "program", "code", "script"):
        filename, source = generate_code(prompt)
        return CreateFile(filename, source)
    return Action("open", "document.txt" if "document" in text else "file.txt")


Rule = Tuple[str, Callable[[str], bool], Callable[[str, str], Resolution]]

RULES: List[Rule] = [
    ("greeting", lambda t: bool(GREETING_RE.match(t)), lambda t, p: Conversational(GREETING_TEXT)),
    ("wellbeing", lambda t: bool(WELLBEING_RE.match(t)), lambda t, p: Conversational(WELLBEING_TEXT)),
    ("thanks", lambda t: "thank" in t, lambda t, p: Conversational(THANKS_TEXT)),
    ("open_app", lambda t: "open" in t, _open_app),
    ("list_files", lambda t: "list" in t and _has(t, "files", "directories", "folder"), lambda t, p: Action("list", "files")),
    ("show_files", lambda t: "show" in t and _has(t, "files", "directory"), lambda t, p: Action("list", "files")),
    ("search", lambda t: bool(re.search(r"\bsearch\b", t)), _search),
    ("find", lambda t: "find" in t and "file" not in t, _find),
    ("disk_usage", lambda t: "check" in t and "disk" in t, lambda t, p: Action("check", "disk usage")),
    ("processes", lambda t: "show" in t and "process" in t, lambda t, p: Action("show", "processes")),
    ("compile", lambda t: _has(t, "compile", "build"), _compile),
    ("run", lambda t: bool(re.search(r"\brun\b", t)), _run),
    ("help", lambda t: bool(HELP_RE.match(t)), lambda t, p: Conversational(CAPABILITIES_TEXT)),
    ("create", lambda t: _has(t, "create", "make", "write"), _create),
    ("close", lambda t: _has(t, "close", "exit", "quit"), lambda t, p: Conversational(EXIT_TEXT)),
]


class PatternResolver:
    """Ordered rule-table resolver with a bounded running time"""

    def __init__(self, timeout: float = 5.0, rules: Optional[List[Rule]] = None):
        self.timeout = timeout
        self.rules = rules if rules is not None else RULES

    def match(self, prompt: str) -> Tuple[Optional[str], Optional[Resolution]]:
        """Return (rule name, resolution) for the first matching rule, or (None, None)"""
        text = prompt.lower().strip()
        for name, predicate, handler in self.rules:
            if predicate(text):
                return name, handler(text, prompt)
        return None, None

    def _resolve(self, prompt: str) -> Resolution:
        name, resolution = self.match(prompt)
        if resolution is None:
            raise UnrecognizedInput(prompt, suggestion_for(prompt.lower()))
        logging.info(f"Pattern rule '{name}' matched: {prompt}")
        return resolution

    def resolve(self, prompt: str) -> Resolution:
        """Resolve prompt; raises UnrecognizedInput or InferenceTimeout"""
        return call_with_timeout(self._resolve, self.timeout, prompt)
