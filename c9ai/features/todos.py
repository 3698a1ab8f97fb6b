"""
C9 AI Todo Manager
Markdown todos in ./todo.md, optionally tagged with executable intents.

Format:
- [ ] Write the report
- [ ] Compile paper @action: compile research_paper.tex
"""

import re
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ..core.errors import C9AIError
from ..core.resolution import Action

OPEN_TODO_PREFIX = "- [ ]"
ACTION_RE = re.compile(r"@action:\s*(\w+)\s*(.*)")


@dataclass
class TodoItem:
    task: str
    action: Optional[Action] = None

    @property
    def actionable(self) -> bool:
        return self.action is not None


def parse_todo_line(line: str) -> Optional[TodoItem]:
    line = line.strip()
    if not line.startswith(OPEN_TODO_PREFIX):
        return None
    body = line[len(OPEN_TODO_PREFIX):].strip()
    match = ACTION_RE.search(body)
    if not match:
        return TodoItem(task=body)
    task = body[:match.start()].strip()
    return TodoItem(task=task, action=Action(match.group(1).lower(), match.group(2).strip()))


def slugify(text: str) -> str:
    return re.sub(r"\s+", "_", text.strip().lower())


class TodoManager:
    """Reads, writes and executes todos"""

    def __init__(
        self,
        dispatcher,
        supervisor=None,
        current_model: Callable[[], str] = lambda: "claude",
        has_local_model: Callable[[], bool] = lambda: False,
        cloud=None,
        todo_path: Optional[Path] = None,
        ask: Callable[[str], str] = input,
    ):
        self.dispatcher = dispatcher
        self.supervisor = supervisor
        self.current_model = current_model
        self.has_local_model = has_local_model
        self.cloud = cloud
        self._todo_path = todo_path
        self.ask = ask

    @property
    def todo_path(self) -> Path:
        # Resolved on every access: the user can cd between commands
        return self._todo_path or (Path.cwd() / "todo.md")

    def read(self) -> List[TodoItem]:
        """Parse todo.md; a missing file means no todos"""
        if not self.todo_path.exists():
            return []
        items = []
        for line in self.todo_path.read_text(encoding="utf-8").splitlines():
            item = parse_todo_line(line)
            if item is not None:
                items.append(item)
        return items

    def actionable(self) -> List[TodoItem]:
        return [item for item in self.read() if item.actionable]

    def _append(self, line: str):
        path = self.todo_path
        existing = path.read_text(encoding="utf-8") if path.exists() else ""
        if existing and not existing.endswith("\n"):
            existing += "\n"
        path.write_text(f"{existing}{line}\n", encoding="utf-8")

    # ═══════════════════════════════════════════════════════════════════
    # COMMANDS
    # ═══════════════════════════════════════════════════════════════════

    def handle(self, args: List[str]):
        """Dispatch a `todos` subcommand; unknown words start a new task"""
        action = args[0].lower() if args else "list"
        rest = " ".join(args[1:])

        if action == "list":
            self.list()
        elif action == "add":
            self.add(rest)
        elif action == "actions":
            self.list_actions()
        elif action == "execute":
            self.execute()
        else:
            self.add(" ".join(args))

    def list(self):
        items = self.read()
        print("\n📋 Todos")
        if not items:
            print(f"No open todos in {self.todo_path}")
            print('💡 Add one with: todos add "<task>"')
            return
        for index, item in enumerate(items, 1):
            marker = "⚡" if item.actionable else "•"
            suffix = f"  ({item.action.verb} {item.action.target})" if item.actionable else ""
            print(f"  {index}. {marker} {item.task}{suffix}")

    def list_actions(self):
        items = self.actionable()
        print("\n⚡ Actionable todos")
        if not items:
            print("No actionable todos found")
            print('💡 Example: todos add "Compile paper @action: compile paper.tex"')
            return
        for index, item in enumerate(items, 1):
            print(f"  {index}. {item.task} -> @{item.action.verb} {item.action.target}")

    def add(self, task: str) -> Optional[str]:
        """Add a todo, inferring an @action when none is given"""
        task = task.strip()
        if not task:
            print("❌ Please provide a task description")
            return None

        if "@action:" in task:
            line = f"{OPEN_TODO_PREFIX} {task}"
        elif "@" in task:
            description, _, raw_action = task.partition("@")
            line = f"{OPEN_TODO_PREFIX} {description.strip()} @action: {raw_action.strip()}"
        else:
            line = f"{OPEN_TODO_PREFIX} {self._intelligent_line(task)}"

        self._append(line)
        logging.info(f"Added todo: {line}")
        print(f"✅ Added: {line[len(OPEN_TODO_PREFIX):].strip()}")
        return line

    def _intelligent_line(self, task: str) -> str:
        model = self.current_model()

        if model == "local" and self.has_local_model() and self.supervisor is not None:
            resolution = self.supervisor.resolve(task)
            if isinstance(resolution, Action):
                print(f"🤖 Inferred action: {resolution.verb} {resolution.target}")
                return f"{task} {resolution.render()}"
            logging.info(f"No action inferred for todo: {task}")
        elif model in ("claude", "gemini"):
            return f"{task} @action: search {slugify(task)}"

        print("💡 Added as a plain task. Tag it with @action: <verb> <target> to make it executable")
        return task

    def _select(self, items: List[TodoItem]) -> List[TodoItem]:
        answer = self.ask("Select todos to execute (e.g. 1,3 or 'all'): ").strip().lower()
        if answer in ("all", "a", "*"):
            return items
        selected = []
        for part in answer.replace(" ", "").split(","):
            if part.isdigit() and 1 <= int(part) <= len(items):
                selected.append(items[int(part) - 1])
        return selected

    def execute(self):
        items = self.actionable()
        if not items:
            print("⚠️  No actionable todos to execute")
            return

        self.list_actions()
        for item in self._select(items):
            print(f"\n⚡ Executing: {item.task}")
            try:
                output = self.dispatcher.execute(item.action)
                print(f"✅ Done: @{item.action.verb} {item.action.target}")
                if output:
                    print(output)
            except C9AIError as e:
                logging.error(f"Todo execution failed: {e}")
                print(f"❌ Failed: {e}")
                self._ask_for_help(item.action, e)

    def _ask_for_help(self, action: Action, error: Exception):
        model = self.current_model()
        if self.cloud is None or model not in ("claude", "gemini"):
            return
        prompt = (
            f'My goal was to execute the intent "@{action.verb} {action.target}". '
            f"It failed with the following error: {error}. "
            "Please analyze this error and provide a step-by-step solution."
        )
        print(f"🤖 Asking {model.upper()} for help...")
        self.cloud.start_session(model, prompt)
