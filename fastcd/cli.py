#!/usr/bin/env python3
"""
fastcd CLI

Quickly open and interact with project directories.

Usage:
  fastcd [flags] [project]

Normally invoked through the `f` shell function printed by
`fastcd-shell`, which applies directory changes after fastcd exits.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .bridge import ShellBridge, wrapper_script, WRAPPERS
from .commands import Command, CommandDispatcher, Context
from .config import Config, load_config
from .console import Console
from .errors import ArgumentError, ConfigError, DirectoryError, FastcdError
from .launch import default_markers, get_launcher
from .registry import FileStore
from .resolver import Resolver

MAX_ARGS = 2
FLAGS = {"-h", "--help", "-s", "--save", "-d", "--delete", "-v", "--view",
         "-o", "--open", "-e", "--edit", "--reset"}


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises ArgumentError instead of exiting."""

    def error(self, message):
        raise ArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="f",
        description="Quickly open and interact with project directories.",
        usage="f [flags] [project]",
        add_help=False,
        allow_abbrev=False,
    )
    parser.set_defaults(command=Command.LOAD)
    parser.add_argument("project", nargs="?", default="",
                        help="Project name (allowing partial match)")

    flags = parser.add_mutually_exclusive_group()
    flags.add_argument("-h", "--help", dest="command", action="store_const", const=Command.HELP,
                       help="Show this help message and exit")
    flags.add_argument("-s", "--save", dest="command", action="store_const", const=Command.SAVE,
                       help="Save current directory as project")
    flags.add_argument("-d", "--delete", dest="command", action="store_const", const=Command.DELETE,
                       help="Delete project with name")
    flags.add_argument("-v", "--view", dest="command", action="store_const", const=Command.VIEW,
                       help="View project in system file explorer")
    flags.add_argument("-o", "--open", dest="command", action="store_const", const=Command.OPEN,
                       help="Open project environment or IDE")
    flags.add_argument("-e", "--edit", dest="command", action="store_const", const=Command.EDIT,
                       help="Open project in $EDITOR")
    flags.add_argument("--reset", dest="command", action="store_const", const=Command.RESET,
                       help="Reset list of projects")
    return parser


def parse_args(argv: List[str], parser: argparse.ArgumentParser = None) -> Tuple[Command, str]:
    """
    Parse command-line tokens into (command, query).

    The flag, if any, comes first; a query alone takes no second token.
    Raises ArgumentError for more than two tokens, unknown flags or
    conflicting flags.
    """
    if len(argv) > MAX_ARGS:
        raise ArgumentError("Too many arguments provided")
    if argv:
        first = argv[0]
        if first.startswith("-") and first not in FLAGS:
            raise ArgumentError(f"Unrecognized argument provided: {first}")
        if not first.startswith("-") and len(argv) > 1:
            raise ArgumentError(f"Unexpected argument after project: {argv[1]}")
    parser = parser or build_parser()
    args = parser.parse_args(argv)
    return args.command, args.project


def configure_logging(level: str):
    numeric = logging.getLevelName(level)
    if not isinstance(numeric, int):
        raise ConfigError(f"Invalid log level: {level}")
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def current_directory() -> Path:
    try:
        return Path(os.getcwd())
    except OSError as e:
        raise DirectoryError(f"Cannot determine current directory: {e}")


def build_dispatcher(config: Config, console: Console = None, help_text: str = "") -> CommandDispatcher:
    """Wire the file store, shell bridge and platform collaborators together."""
    console = console or Console()
    context = Context(
        console=console,
        resolver=Resolver(console, home=config.home),
        cwd=current_directory(),
        editor=config.editor,
        launcher=get_launcher(),
        markers=default_markers(
            start_script=config.start_script,
            workspace_suffixes=config.workspace_suffixes,
            project_suffixes=config.project_suffixes,
        ),
    )
    return CommandDispatcher(
        store=FileStore(config.store_path),
        bridge=ShellBridge(config.bridge_path),
        context=context,
        help_text=help_text,
    )


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    try:
        command, query = parse_args(argv, parser)
        if command is Command.HELP:
            print(parser.format_help(), end="")
            return 0
        config = load_config()
        configure_logging(config.log_level)
        dispatcher = build_dispatcher(config, help_text=parser.format_help())
        return dispatcher.dispatch(command, query)
    except FastcdError as e:
        print(f"fastcd: {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("\nfastcd: Cancelled", file=sys.stderr)
        return 1


def shell_main(argv: Optional[List[str]] = None) -> int:
    """Print the shell wrapper function for a shell."""
    parser = argparse.ArgumentParser(
        prog="fastcd-shell",
        description="Print the `f` shell function. Add `eval \"$(fastcd-shell bash)\"` to your shell rc.",
    )
    parser.add_argument("shell", nargs="?", choices=sorted(WRAPPERS),
                        help="Shell to generate for (default: from $SHELL)")
    args = parser.parse_args(argv)

    shell = args.shell or os.path.basename(os.environ.get("SHELL", ""))
    if shell not in WRAPPERS:
        shell = "bash"

    try:
        config = load_config()
    except FastcdError as e:
        print(f"fastcd-shell: {e}", file=sys.stderr)
        return e.exit_code

    print(wrapper_script(shell, config.bridge_path), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
