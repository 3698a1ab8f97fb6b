#!/usr/bin/env python3
"""C9 AI - command-line entry point

Without arguments starts the interactive assistant; subcommands run a single
command and exit.
"""

import sys
import shlex
import argparse
import logging
from typing import List, Optional

from . import __version__
from .config.settings import get_config


def setup_logging(logs_dir, verbose: bool = False):
    """File log at INFO, console at WARNING (INFO with --verbose)"""
    file_handler = logging.FileHandler(logs_dir / "c9ai.log")
    file_handler.setLevel(logging.INFO)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[file_handler, console_handler],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="c9ai", description="C9 AI - your command-line assistant")
    parser.add_argument("--version", action="version", version=f"c9ai {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show info logs on the console")

    subparsers = parser.add_subparsers(dest="command")

    switch = subparsers.add_parser("switch", help="Switch the default model")
    switch.add_argument("model", choices=["claude", "gemini", "local"])

    todos = subparsers.add_parser("todos", help="Manage todos in ./todo.md")
    todos.add_argument("args", nargs="*", help="list | add <task> | actions | execute")

    subparsers.add_parser("analytics", help="Show usage analytics")

    tools = subparsers.add_parser("tools", help="Manage registered tools")
    tools.add_argument("args", nargs="*", help="list | add | edit | remove | run")

    models = subparsers.add_parser("models", help="Manage local models")
    models.add_argument("action", nargs="?", default="list", help="list | install | remove | status")
    models.add_argument("name", nargs="?", help="Model name (phi-3, tinyllama, llama)")

    scan = subparsers.add_parser("scan", help="Build a knowledge base from local files")
    scan.add_argument("directories", nargs="*")

    subparsers.add_parser("config", help="Show configuration")
    subparsers.add_parser("logo", help="Show the banner")
    subparsers.add_parser("banner", help="Show the banner")
    subparsers.add_parser("interactive", aliases=["i"], help="Start interactive mode")
    return parser


def to_command_line(args: argparse.Namespace) -> str:
    """Turn parsed arguments back into the equivalent interactive command"""
    if args.command == "switch":
        return f"switch {args.model}"
    if args.command in ("todos", "tools"):
        return " ".join([args.command] + [shlex.quote(a) for a in args.args])
    if args.command == "models":
        return " ".join(filter(None, ["models", args.action, args.name]))
    if args.command == "scan":
        return " ".join(["scan"] + [shlex.quote(d) for d in args.directories])
    return args.command


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = get_config()
    setup_logging(config.logs_dir, verbose=args.verbose)

    from .core.assistant import build_router
    from .core.assistant import main as interactive_main

    if args.command in (None, "interactive", "i"):
        return interactive_main()

    router = build_router(config)
    router.route(to_command_line(args))
    return 0


if __name__ == "__main__":
    sys.exit(main())
