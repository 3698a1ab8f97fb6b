"""Command Router - top-level dispatcher for one line of input

Dispatch order (first match wins):
1. "!" shell passthrough ("cd" handled in-process)
2. "@" mode sigils
3. named commands (first word, case-insensitive)
4. conversational/actionable classification of free text

Every handler runs inside one try/except at the route() boundary, so a
failing command is reported and the session carries on.
"""

import shlex
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..config.settings import Config
from ..execution.action_dispatcher import ActionDispatcher
from ..execution.cloud_cli import CloudCLI
from ..execution.platform_ops import PlatformOps
from ..execution.shell import CommandRunner
from ..features.goals import GoalRunner
from ..features.todos import TodoManager
from ..memory.interaction_log import InteractionLog
from ..memory.knowledge import KnowledgeScanner
from ..models.model_manager import ModelManager
from ..models.session import ModelSession, has_local_model
from ..tools.base import ToolDescriptor
from ..tools.registry import ToolRegistry
from ..tools.selector import ToolSelector
from .branding import HELP_TEXT, banner
from .conversation_classifier import ConversationClassifier
from .errors import C9AIError, CommandFailed, ToolRegistryError
from .resolution import Action, Conversational, CreateFile, Failure, Resolution
from .supervisor import FallbackSupervisor

TOOL_ACTIONS = ["list", "add", "edit", "remove", "run"]
EXIT_WORDS = ("exit", "quit", "stop", "back")


class CommandRouter:
    """Routes raw input to shell, sessions, named commands or the NL chain"""

    def __init__(
        self,
        config: Config,
        runner: CommandRunner,
        ops: PlatformOps,
        classifier: ConversationClassifier,
        supervisor: FallbackSupervisor,
        dispatcher: ActionDispatcher,
        cloud: CloudCLI,
        todos: TodoManager,
        tools: ToolRegistry,
        selector: ToolSelector,
        models: ModelManager,
        interactions: InteractionLog,
        goals: GoalRunner,
        session: Optional[ModelSession] = None,
        ask: Callable[[str], str] = input,
    ):
        self.config = config
        self.runner = runner
        self.ops = ops
        self.classifier = classifier
        self.supervisor = supervisor
        self.dispatcher = dispatcher
        self.cloud = cloud
        self.todos = todos
        self.tools = tools
        self.selector = selector
        self.models = models
        self.interactions = interactions
        self.goals = goals
        self.session = session
        self.ask = ask

        self.sigils: Dict[str, Callable[[str], None]] = {
            "claude": lambda rest: self.cloud_session("claude", rest),
            "gemini": lambda rest: self.cloud_session("gemini", rest),
            "local": self.local,
            "conv": self.handle_conversation,
            "chat": self.handle_conversation,
            "cmd": self.handle_command,
            "command": self.handle_command,
            "tool": self.handle_tool,
        }

        self.commands: Dict[str, Callable[[str], None]] = {
            "claude": lambda rest: self.cloud_prompt("claude", rest),
            "gemini": lambda rest: self.cloud_prompt("gemini", rest),
            "switch": self.switch_model,
            "todos": lambda rest: self.todos.handle(self._split(rest)),
            "add": self.todos.add,
            "analytics": lambda rest: self.interactions.show_analytics(self.config.current_model),
            "tools": self.tools_command,
            "models": self.models_command,
            "scan": self.scan,
            "issues": self.issues,
            "achieve": self.goals.run,
            "goal": self.goals.run,
            "config": self.show_config,
            "help": lambda rest: print(HELP_TEXT),
            "logo": lambda rest: print(banner(self.config.current_model)),
            "banner": lambda rest: print(banner(self.config.current_model)),
        }

    # ═══════════════════════════════════════════════════════════════════
    # ENTRY POINT
    # ═══════════════════════════════════════════════════════════════════

    def route(self, raw_input: str):
        text = raw_input.strip()
        if not text:
            return
        try:
            self._dispatch(text)
        except Exception as e:
            logging.error(f"Error executing command '{text}': {e}", exc_info=True)
            print(f"❌ Error executing command: {e}")

    def _dispatch(self, text: str):
        if text.startswith("!"):
            self.shell(text[1:].strip())
            return

        if text.startswith("@"):
            sigil, _, rest = text[1:].partition(" ")
            handler = self.sigils.get(sigil.lower())
            if handler is not None:
                handler(rest.strip())
                return

        word, _, rest = text.partition(" ")
        handler = self.commands.get(word.lower())
        if handler is not None:
            handler(rest.strip())
            return

        if self.classifier.is_actionable(text):
            self.handle_command(text)
        else:
            self.handle_conversation(text)

    # ═══════════════════════════════════════════════════════════════════
    # SHELL & SESSIONS
    # ═══════════════════════════════════════════════════════════════════

    def shell(self, command: str):
        if not command:
            print("💡 Usage: !<command>   e.g. !ls -la")
            return

        parts = command.split(None, 1)
        if parts[0] == "cd":
            target = parts[1].strip() if len(parts) > 1 else None
            try:
                cwd = self.runner.change_directory(target)
                print(f"📁 {cwd}")
            except OSError as e:
                print(f"❌ cd: {e}")
            return

        code = self.runner.passthrough(command)
        if code != 0:
            print(f"[c9ai: Command exited with code {code}]")

    def cloud_session(self, model: str, prompt: str = ""):
        if prompt:
            self.interactions.log(model, prompt)
        self.cloud.start_session(model, prompt)

    def cloud_prompt(self, model: str, prompt: str):
        if not prompt:
            print(f"❌ Please provide a prompt, e.g. {model} \"explain this error\"")
            print(f"💡 For an interactive session use @{model}")
            return
        self.cloud_session(model, prompt)

    def local(self, text: str):
        if text:
            self.interactions.log("local", text)
            self.present(self.supervisor.resolve(text, conversational=not self.classifier.is_actionable(text)))
            return

        print("🤖 Local chat - type 'back' to return")
        while True:
            try:
                line = self.ask("local> ").strip()
            except EOFError:
                break
            if line.lower() in EXIT_WORDS:
                break
            if line:
                self.local(line)

    # ═══════════════════════════════════════════════════════════════════
    # NATURAL LANGUAGE
    # ═══════════════════════════════════════════════════════════════════

    def handle_conversation(self, text: str):
        if not text:
            print("💡 Usage: @conv <message>")
            return
        self.interactions.log("local", text)
        resolution = self.supervisor.resolve(text, conversational=True)
        if isinstance(resolution, (Action, CreateFile)):
            print(f"💡 That sounds like a command. Try: @cmd {text}")
            return
        self.present(resolution)

    def handle_command(self, text: str):
        if not text:
            print("💡 Usage: @cmd <instruction>")
            return
        self.interactions.log("local", text)
        self.present(self.supervisor.resolve(text))

    def present(self, resolution: Resolution):
        """Act on a resolution and report the outcome"""
        if isinstance(resolution, Action):
            print(f"⚡ {resolution.verb} {resolution.target}".rstrip())
            try:
                output = self.dispatcher.execute(resolution)
            except C9AIError as e:
                logging.error(f"Action failed: {resolution.render()}: {e}")
                print(f"❌ Action failed: {e}")
                return
            print(output if output else "✅ Done")
        elif isinstance(resolution, CreateFile):
            self.dispatcher.create_file(resolution)
        elif isinstance(resolution, Conversational):
            print(f"🤖 {resolution.text}")
        elif isinstance(resolution, Failure):
            print(f"❌ {resolution.detail}")
            if resolution.suggestion:
                print(f"💡 {resolution.suggestion}")

    # ═══════════════════════════════════════════════════════════════════
    # TOOLS
    # ═══════════════════════════════════════════════════════════════════

    def handle_tool(self, text: str):
        if not text:
            self.list_tools()
            return

        name, _, rest = text.partition(" ")
        if self.tools.has(name):
            self.run_tool(name, self._tool_arguments(name, rest))
            return

        if self.supervisor.model_available():
            selection = self.selector.select(text)
        else:
            selection = self.selector.select_by_pattern(text)

        if selection is None:
            print(f"❌ No tool matches: {text}")
            print("💡 See registered tools with: tools list")
            return
        print(f"🔧 Selected tool: {selection.name} ({selection.source})")
        self.run_tool(selection.name, selection.parameters)

    def _tool_arguments(self, name: str, rest: str) -> Dict[str, str]:
        """Parse key=value pairs; bare words fill the remaining parameters in order"""
        tool = self.tools.get(name)
        params: Dict[str, str] = {}
        positional: List[str] = []
        for token in self._split(rest):
            key, sep, value = token.partition("=")
            if sep and key in tool.parameters:
                params[key] = value
            else:
                positional.append(token)
        for param in tool.parameters:
            if param not in params and positional:
                params[param] = positional.pop(0)
        return params

    def run_tool(self, name: str, params: Dict[str, str]):
        tool = self.tools.get(name)
        try:
            command = tool.render(params, self.ops.family)
        except ToolRegistryError as e:
            print(f"❌ {e}")
            return
        print(f"🔧 {command}")
        try:
            output = self.runner.run(command, capture=True)
        except CommandFailed as e:
            print(f"❌ Tool failed (exit {e.exit_code}): {e}")
            return
        print(output if output else "✅ Done")

    @staticmethod
    def _split(text: str) -> List[str]:
        try:
            return shlex.split(text)
        except ValueError:
            return text.split()

    def list_tools(self):
        print("\n🔧 Registered tools")
        for name, info in self.tools.list_all().items():
            print(f"  • {name}: {info['description']}")
            print(f"      {info['command']}")

        scripts = sorted(p.name for p in self.config.scripts_dir.iterdir() if p.is_file()) \
            if self.config.scripts_dir.exists() else []
        print(f"\n📜 Scripts in {self.config.scripts_dir}")
        if scripts:
            for script in scripts:
                print(f"  • {script}  (run {script})")
        else:
            print("  (none)")

    def tools_command(self, rest: str):
        args = self._split(rest)
        action = args[0].lower() if args else "list"
        try:
            if action == "list":
                self.list_tools()
            elif action == "add":
                if len(args) < 3:
                    print('❌ Usage: tools add <name> "<command with {{param}}>" [description]')
                    return
                tool = ToolDescriptor.from_template(args[1], args[2], " ".join(args[3:]))
                self.tools.register(tool)
                params = ", ".join(tool.parameters) or "none"
                print(f"✅ Added tool {tool.name} (parameters: {params})")
            elif action == "edit":
                if len(args) < 4:
                    print("❌ Usage: tools edit <name> <description|command|platform.<os>> <value>")
                    return
                self.tools.edit(args[1], args[2], " ".join(args[3:]))
                print(f"✅ Updated tool {args[1]}")
            elif action == "remove":
                if len(args) < 2:
                    print("❌ Usage: tools remove <name>")
                    return
                self.tools.remove(args[1])
                print(f"✅ Removed tool {args[1]}")
            elif action == "run":
                if len(args) < 2 or not self.tools.has(args[1]):
                    print("❌ Usage: tools run <name> [key=value ...]")
                    return
                self.run_tool(args[1], self._tool_arguments(args[1], " ".join(shlex.quote(a) for a in args[2:])))
            else:
                print(f"❌ Unknown tools action: {action}")
                print(f"💡 Available actions: {', '.join(TOOL_ACTIONS)}")
        except ToolRegistryError as e:
            print(f"❌ {e}")

    # ═══════════════════════════════════════════════════════════════════
    # NAMED COMMANDS
    # ═══════════════════════════════════════════════════════════════════

    def switch_model(self, rest: str):
        model = rest.strip().lower()
        try:
            self.config.set_model(model)
        except ValueError as e:
            print(f"❌ {e}")
            return
        print(f"✅ Switched to {model.upper()}")

        if model == "local":
            if not has_local_model(self.config.models_dir):
                print("⚠️  No local model installed")
                print("💡 Install one with: models install phi-3")
                return
            if self.session is not None:
                state = self.session.initialize()
                print(f"🤖 Local model: {self.session.path.name} ({state.value})")
                if self.session.fallback_mode:
                    print("💡 Inference engine not reachable - using pattern matching")
            return

        version = self.cloud.check(model)
        if version:
            print(f"✅ {model} CLI available: {version}")
        else:
            print(f"⚠️  {model} CLI not found - install it to use {model.upper()} sessions")

    def models_command(self, rest: str):
        args = rest.split()
        self.models.handle(args[0] if args else None, args[1] if len(args) > 1 else None, confirm=self.ask)

    def scan(self, rest: str):
        directories = [Path(d) for d in self._split(rest)] or [Path.cwd()]
        scanner = KnowledgeScanner()
        scanner.scan(directories)
        scanner.save(self.config.knowledge_file)

    def issues(self, rest: str):
        try:
            output = self.runner.run("gh issue list --state open", capture=True)
        except CommandFailed as e:
            print(f"❌ Could not list issues: {e}")
            print("💡 Install the GitHub CLI (gh) and run 'gh auth login'")
            return
        print("\n🐙 Open GitHub issues")
        print(output if output else "No open issues")

    def show_config(self, rest: str):
        print("\n⚙️  C9 AI Configuration")
        print(f"Config home: {self.config.config_dir}")
        print(f"Default model: {self.config.current_model.upper()}")
        print(f"Max iterations: {self.config.get('defaults.max_iterations', 20)}")
        print(f"Registered tools: {len(self.tools.list_all())}")
        print(f"App mappings: {self.config.app_mappings_file}")
        print(f"Scripts: {self.config.scripts_dir}")
        print(f"Platform: {self.ops.family}")
        if self.session is not None:
            print(f"Local model session: {self.session.state.value}")
