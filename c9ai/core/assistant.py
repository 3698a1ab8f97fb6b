"""Interactive assistant - wiring and the REPL loop

Input is handled strictly one line at a time: each line is routed to
completion before the next prompt is shown.
"""

import os
import sys
import signal
import logging
from typing import Callable, Optional

from ..config.settings import Config, get_config
from ..execution.action_dispatcher import ActionDispatcher
from ..execution.app_launcher import AppLauncher
from ..execution.cloud_cli import CloudCLI
from ..execution.intent_executor import IntentExecutor
from ..execution.platform_ops import PlatformOps, get_platform_ops
from ..execution.shell import CommandRunner, get_runner
from ..features.goals import GoalRunner
from ..features.todos import TodoManager
from ..memory.interaction_log import InteractionLog
from ..models.model_manager import ModelManager
from ..models.providers.ollama import OllamaProvider
from ..models.session import ModelSession, has_local_model
from ..tools.registry import ToolRegistry
from ..tools.selector import ToolSelector
from .branding import banner
from .command_router import CommandRouter
from .conversation_classifier import ConversationClassifier
from .pattern_resolver import PatternResolver
from .supervisor import FallbackSupervisor

EXIT_COMMANDS = ("exit", "quit", "stop")
EMERGENCY_EXIT = "emergency exit"


def build_router(
    config: Optional[Config] = None,
    ops: Optional[PlatformOps] = None,
    runner: Optional[CommandRunner] = None,
    ask: Callable[[str], str] = input,
) -> CommandRouter:
    """Create every component once and inject them into the router"""
    config = config or get_config()
    ops = ops or get_platform_ops()
    runner = runner or get_runner()

    provider = OllamaProvider(
        base_url=config.get("ollama.base_url", "http://localhost:11434"),
        request_timeout=config.get("ollama.request_timeout", 120),
    )
    session = ModelSession(
        config.models_dir,
        provider,
        timeout=config.get("inference.timeout", 30),
        max_tokens=config.get("inference.max_tokens", 150),
        temperature=config.get("inference.temperature", 0.7),
        repeat_penalty=config.get("inference.repeat_penalty", 1.1),
    )
    supervisor = FallbackSupervisor(
        PatternResolver(timeout=config.get("inference.resolver_timeout", 5)),
        session=session,
        max_retries=config.get("inference.max_retries", 3),
        retry_delay=config.get("inference.retry_delay", 1.0),
    )

    launcher = AppLauncher(config.app_mappings_file, ops, runner)
    executor = IntentExecutor(ops, runner, config.scripts_dir, launcher=launcher)
    dispatcher = ActionDispatcher(executor, ops, runner)
    cloud = CloudCLI(runner, config.get("cloud"))
    current_model = lambda: config.current_model

    todos = TodoManager(
        dispatcher,
        supervisor=supervisor,
        current_model=current_model,
        has_local_model=lambda: has_local_model(config.models_dir),
        cloud=cloud,
        ask=ask,
    )
    tools = ToolRegistry(config.tools_file)

    return CommandRouter(
        config=config,
        runner=runner,
        ops=ops,
        classifier=ConversationClassifier(),
        supervisor=supervisor,
        dispatcher=dispatcher,
        cloud=cloud,
        todos=todos,
        tools=tools,
        selector=ToolSelector(tools, infer=session.infer),
        models=ModelManager(config.models_dir, config.model_catalog(), current_model),
        interactions=InteractionLog(config.logs_dir),
        goals=GoalRunner(supervisor, dispatcher, cloud, current_model, config.get("defaults.max_iterations", 20)),
        session=session,
        ask=ask,
    )


class Assistant:
    """Interactive C9 AI session"""

    def __init__(self, router: Optional[CommandRouter] = None, ask: Callable[[str], str] = input):
        self.router = router or build_router(ask=ask)
        self.ask = ask
        logging.info("Assistant initialized")

    def _install_signal_handlers(self):
        def on_sigterm(signum, frame):
            print("\n👋 Received termination signal, shutting down gracefully...")
            sys.exit(0)

        signal.signal(signal.SIGTERM, on_sigterm)

    def start(self):
        """Start the assistant"""
        self._install_signal_handlers()
        print(banner(self.router.config.current_model))
        print("💡 Type 'help' for commands, 'exit' to quit\n")

        while True:
            try:
                user_input = self.ask("c9ai> ").strip()
            except KeyboardInterrupt:
                print("\n💡 Type 'exit' to quit gracefully or 'emergency exit' to force quit")
                continue
            except EOFError:
                print("\n👋 Goodbye!")
                break

            if not user_input:
                continue

            if user_input.lower() == EMERGENCY_EXIT:
                print("🚨 Emergency exit")
                os._exit(1)

            if user_input.lower() in EXIT_COMMANDS:
                print("👋 Goodbye!")
                break

            try:
                self.router.route(user_input)
            except KeyboardInterrupt:
                print("\n⚠️  Interrupted")


def main() -> int:
    """Run the interactive assistant"""
    try:
        Assistant().start()
        return 0
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        print(f"❌ Fatal error: {e}")
        return 1
