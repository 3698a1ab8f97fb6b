"""Intent Executor - verb + target -> one platform command

Owns the verb vocabulary. Validation happens before anything is spawned:
an unsupported target never reaches the shell.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from ..core.errors import UnknownVerb, UnsupportedTarget, ScriptNotFound
from .platform_ops import PlatformOps
from .shell import CommandRunner

SEARCH_URL = "https://www.google.com/search?q="


class IntentExecutor:
    """Executes open/compile/run/search intents"""

    def __init__(self, ops: PlatformOps, runner: CommandRunner, scripts_dir: Path, launcher=None):
        self.ops = ops
        self.runner = runner
        self.scripts_dir = Path(scripts_dir)
        self.launcher = launcher

    def execute(self, verb: str, target: str) -> str:
        """Execute an intent and return captured stdout"""
        verb = verb.lower().strip()
        target = target.strip()
        logging.info(f"Executing intent: {verb} {target}")

        if verb == "open":
            return self._open(target)
        if verb == "compile":
            return self._compile(target)
        if verb == "run":
            return self._run(target)
        if verb == "search":
            return self._search(target)
        raise UnknownVerb(verb)

    def _open(self, target: str) -> str:
        if self.launcher is not None and self._is_app_alias(target):
            executable = self.launcher.open_application(target)
            return f"Opened {executable}"
        return self.runner.run(self.ops.open_command(target), capture=True)

    @staticmethod
    def _is_app_alias(target: str) -> bool:
        if "://" in target or "/" in target or "\\" in target or "." in target:
            return False
        return not Path(target).exists()

    def _compile(self, target: str) -> str:
        if not target.lower().endswith(".tex"):
            raise UnsupportedTarget(target, f"Unsupported compile target: {target}")
        return self.runner.run(f'pdflatex "{target}"', capture=True)

    def resolve_script(self, target: str) -> Path:
        """Find a script in the scripts directory, then relative to the cwd"""
        for candidate in (self.scripts_dir / target, Path(target)):
            if candidate.is_file():
                return candidate
        raise ScriptNotFound(target)

    def _run(self, target: str) -> str:
        if target.lower().endswith(".sh") and not self.ops.supports_shell_scripts:
            raise UnsupportedTarget(target, "Shell scripts (.sh) not supported on Windows. Use .bat files instead.")

        script = self.resolve_script(target)
        command: Optional[str] = self.ops.script_command(script)
        if command is None:
            raise UnsupportedTarget(target)
        return self.runner.run(command, capture=True)

    def _search(self, query: str) -> str:
        url = SEARCH_URL + quote(query, safe="")
        return self.runner.run(self.ops.open_command(url), capture=True)
