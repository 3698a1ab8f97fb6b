"""Cloud AI sessions - the claude and gemini CLIs run as opaque subprocesses"""

import logging
from typing import Dict, Optional

from ..core.errors import CommandFailed
from .shell import CommandRunner

CLOUD_MODELS = ("claude", "gemini")


class CloudCLI:
    """Hands the terminal to a cloud AI command-line tool"""

    def __init__(self, runner: CommandRunner, commands: Optional[Dict[str, str]] = None):
        self.runner = runner
        self.commands = commands or {model: model for model in CLOUD_MODELS}

    def command_for(self, model: str) -> str:
        if model not in self.commands:
            raise ValueError(f"Unknown cloud model: {model}")
        return self.commands[model]

    def start_session(self, model: str, prompt: str = "") -> int:
        """Start an interactive session, optionally seeded with a first prompt"""
        argv = [self.command_for(model)]
        if prompt:
            argv.append(prompt)

        print(f"\n🤖 Starting {model.upper()} session (exit the tool to return to c9ai)...")
        try:
            code = self.runner.interactive(argv)
        except FileNotFoundError:
            print(f"❌ {argv[0]} CLI not found")
            print(f"💡 Install the {model} CLI and make sure '{argv[0]}' is on your PATH")
            return 127

        if code != 0:
            logging.warning(f"{argv[0]} exited with code {code}")
        print(f"\n✅ Returned from {model.upper()} session")
        return code

    def check(self, model: str) -> Optional[str]:
        """Return the CLI version string, or None when the CLI is unavailable"""
        try:
            return self.runner.run(f"{self.command_for(model)} --version", capture=True)
        except CommandFailed as e:
            logging.warning(f"{model} CLI check failed: {e}")
            return None
