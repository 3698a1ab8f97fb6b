"""Action dispatch - runs the Action values produced by the resolvers

System queries (list files, disk usage, processes) map straight onto
PlatformOps commands; everything else goes to the Intent Executor, which
rejects verbs outside its vocabulary.
"""

from pathlib import Path
from typing import Callable, Dict, Optional

from ..core.resolution import Action, CreateFile
from .intent_executor import IntentExecutor
from .platform_ops import PlatformOps
from .shell import CommandRunner

PREVIEW_LINES = 10


class ActionDispatcher:
    def __init__(self, executor: IntentExecutor, ops: PlatformOps, runner: CommandRunner):
        self.executor = executor
        self.ops = ops
        self.runner = runner
        self.system_queries: Dict[str, Callable[[], str]] = {
            "list files": ops.list_files_command,
            "check disk usage": ops.disk_usage_command,
            "show processes": ops.process_list_command,
        }

    def system_command(self, action: Action) -> Optional[str]:
        builder = self.system_queries.get(f"{action.verb} {action.target}".strip().lower())
        return builder() if builder else None

    def execute(self, action: Action) -> str:
        """Run an action and return captured output"""
        command = self.system_command(action)
        if command is not None:
            return self.runner.run(command, capture=True)
        return self.executor.execute(action.verb, action.target)

    @staticmethod
    def create_file(request: CreateFile, directory: Optional[Path] = None) -> Path:
        """Write a generated file and print a short preview"""
        path = (directory or Path.cwd()) / request.name
        path.write_text(request.content, encoding="utf-8")

        lines = request.content.splitlines()
        print(f"\n✅ Created {path.name}")
        print("-" * 40)
        for line in lines[:PREVIEW_LINES]:
            print(line)
        if len(lines) > PREVIEW_LINES:
            print(f"... ({len(lines) - PREVIEW_LINES} more lines)")
        print("-" * 40)
        print(f"💡 Run it with: run {path.name}")
        return path
