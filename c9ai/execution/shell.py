"""Process execution primitive

All subprocesses go through CommandRunner so callers (and tests) have one
seam to replace.
"""

import os
import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from ..core.errors import CommandFailed


class CommandRunner:
    """Runs shell commands with optional output capture"""

    def run(self, command: str, capture: bool = True, cwd: Optional[str] = None) -> str:
        """Run a command through the shell.

        Returns trimmed stdout when capturing (empty string otherwise).
        Raises CommandFailed on a non-zero exit code.
        """
        logging.info(f"Running command: {command}")
        result = subprocess.run(
            command,
            shell=True,
            cwd=cwd,
            capture_output=capture,
            text=True,
        )
        if result.returncode != 0:
            raise CommandFailed(result.returncode, result.stderr if capture else "")
        return result.stdout.strip() if capture and result.stdout else ""

    def passthrough(self, command: str) -> int:
        """Run a command with inherited stdio and return its exit code"""
        logging.info(f"Shell passthrough: {command}")
        result = subprocess.run(command, shell=True)
        return result.returncode

    def interactive(self, argv: List[str]) -> int:
        """Hand the terminal to an interactive program (no shell)"""
        logging.info(f"Starting interactive session: {argv[0]}")
        result = subprocess.run(argv)
        return result.returncode

    def change_directory(self, target: Optional[str] = None) -> Path:
        """Change the process working directory. No subprocess is spawned."""
        if not target or target == "~":
            path = Path.home()
        else:
            path = Path(os.path.expanduser(target))
        os.chdir(path)
        return Path.cwd()


# Global instance
_runner: Optional[CommandRunner] = None


def get_runner() -> CommandRunner:
    """Get global CommandRunner instance"""
    global _runner
    if _runner is None:
        _runner = CommandRunner()
    return _runner
