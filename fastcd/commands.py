# fastcd/commands.py
"""
Command handlers and dispatcher.

Each handler receives the loaded registry and returns an Outcome: the
registry (mutated or not), whether it must be persisted or purged, an
optional action for the invoking shell, and the exit code. The dispatcher
performs the persistence and shell hand-off, so handlers never touch the
store or the bridge themselves.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .bridge import ShellAction, ShellBridge
from .console import Console
from .errors import ArgumentError, ConfigError, DirectoryError, LaunchError, NotFoundError
from .launch import Launcher, Marker, default_markers, detect_target, get_launcher
from .registry import Entry, Registry, RegistryStore
from .resolver import NO_PROJECTS_ERROR, Resolver

logger = logging.getLogger(__name__)


class Command(Enum):
    LOAD = auto()
    SAVE = auto()
    DELETE = auto()
    VIEW = auto()
    OPEN = auto()
    EDIT = auto()
    RESET = auto()
    HELP = auto()


@dataclass
class Outcome:
    """Result of running a command handler."""
    registry: Registry
    persist: bool = False
    purge: bool = False
    action: Optional[ShellAction] = None
    exit_code: int = 0


def run_program(argv: List[str]) -> int:
    """Run a program in the foreground and return its exit status."""
    return subprocess.call(argv)


@dataclass
class Context:
    """
    Collaborators available to command handlers.

    Attributes:
        console: User interaction
        resolver: Query resolution
        cwd: Working directory the command was started from
        editor: Editor program, if configured
        launcher: Platform "open" launcher
        markers: Project markers checked by --open, in order
        run: Runs a program in the foreground, returning its exit status
        chdir: Changes this process's working directory
    """
    console: Console
    resolver: Resolver
    cwd: Path
    editor: Optional[str] = None
    launcher: Launcher = field(default_factory=get_launcher)
    markers: List[Marker] = field(default_factory=default_markers)
    run: Callable[[List[str]], int] = run_program
    chdir: Callable[[Path], None] = os.chdir


Handler = Callable[[Context, str, Registry], Outcome]

# Global handler registry
_HANDLERS: Dict[Command, Handler] = {}


def handles(command: Command) -> Callable:
    """Decorator to register the handler for a command."""
    def decorator(fn: Handler) -> Handler:
        _HANDLERS[command] = fn
        return fn
    return decorator


def get_handler(command: Command) -> Optional[Handler]:
    return _HANDLERS.get(command)


def _same_directory(a: Path, b: Path) -> bool:
    if a == b:
        return True
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


@handles(Command.LOAD)
def load_project(ctx: Context, query: str, registry: Registry) -> Outcome:
    entry = ctx.resolver.resolve(query, registry, "Which project should be loaded?")

    if _same_directory(entry.path, ctx.cwd):
        ctx.console.print(f"Already in \"{entry.name}\"")
        return Outcome(registry)

    if not entry.path.is_dir():
        logger.warning(f"Project directory no longer exists: {entry.path}")

    ctx.console.print(f"Switching to \"{entry.name}\"")
    return Outcome(registry, action=ShellAction.change_directory(entry.path))


@handles(Command.SAVE)
def save_project(ctx: Context, query: str, registry: Registry) -> Outcome:
    name = query or ctx.console.ask("Enter new project name: ")
    if not name:
        raise ArgumentError("Project name cannot be empty")

    if name in registry:
        message = f"Project named \"{name}\" already exists. Overwrite"
        if not ctx.console.confirm(message):
            return Outcome(registry)

    registry.set(name, ctx.cwd)
    ctx.console.print(f"Saved project \"{name}\"")
    return Outcome(registry, persist=True)


@handles(Command.DELETE)
def delete_project(ctx: Context, query: str, registry: Registry) -> Outcome:
    entry = ctx.resolver.resolve(query, registry, "Which project should be deleted?")

    if not ctx.console.confirm(f"Delete \"{entry.name}\""):
        return Outcome(registry)

    registry.delete(entry.name)
    ctx.console.print(f"Deleted project \"{entry.name}\"")
    return Outcome(registry, persist=True)


@handles(Command.VIEW)
def view_project(ctx: Context, query: str, registry: Registry) -> Outcome:
    entry = ctx.resolver.resolve(query, registry, "Which project should open in the file explorer?")

    ctx.console.print(f"Opening \"{entry.name}\" in file explorer...")
    ctx.launcher.open(entry.path)
    return Outcome(registry)


def _edit_entry(ctx: Context, entry: Entry, editor: str, registry: Registry) -> Outcome:
    if not entry.path.is_dir():
        raise DirectoryError(f"Project directory does not exist: {entry.path}")

    ctx.console.print(f"Opening \"{entry.name}\" with {editor}...")
    action = ShellAction.run_in(entry.path, editor, entry.path)
    return Outcome(registry, action=action)


def _require_editor(ctx: Context) -> str:
    if not ctx.editor:
        raise ConfigError("No editor configured. Please set the $EDITOR environment variable")
    return ctx.editor


@handles(Command.OPEN)
def open_project(ctx: Context, query: str, registry: Registry) -> Outcome:
    entry = ctx.resolver.resolve(query, registry, "Which project would you like to open?")
    target = detect_target(entry.path, ctx.markers)

    if target is None:
        editor = _require_editor(ctx)
        return _edit_entry(ctx, entry, editor, registry)

    if target.kind == "start":
        ctx.console.print(f"Starting \"{entry.name}\"...")
        try:
            ctx.chdir(entry.path)
        except OSError as e:
            raise DirectoryError(f"Failed to enter {entry.path}: {e}")
        try:
            code = ctx.run([f"./{target.path.name}"])
        except OSError as e:
            raise LaunchError(f"Failed to execute start script: {e}")
        # Killed by a signal
        if code < 0:
            code = 128 - code
        return Outcome(registry, exit_code=code)

    ctx.console.print(f"Opening \"{entry.name}\" with {target.path.name}...")
    ctx.launcher.open(target.path)
    return Outcome(registry)


@handles(Command.EDIT)
def edit_project(ctx: Context, query: str, registry: Registry) -> Outcome:
    editor = _require_editor(ctx)
    entry = ctx.resolver.resolve(query, registry, f"Which project should be opened with {editor}?")

    return _edit_entry(ctx, entry, editor, registry)


@handles(Command.RESET)
def reset_projects(ctx: Context, query: str, registry: Registry) -> Outcome:
    if len(registry) == 0:
        raise NotFoundError(NO_PROJECTS_ERROR)

    if not ctx.console.confirm(f"Remove {_plural(len(registry), 'saved project')}"):
        return Outcome(registry)

    registry.clear()
    ctx.console.print("Removed all saved projects")
    return Outcome(registry, purge=True)


class CommandDispatcher:
    """
    Runs one command against the stored registry.

    Args:
        store: Where the registry is loaded from and persisted to
        bridge: Hand-off to the invoking shell
        context: Collaborators passed to handlers
        help_text: Printed for Command.HELP
    """

    def __init__(self, store: RegistryStore, bridge: ShellBridge, context: Context, help_text: str = ""):
        self.store = store
        self.bridge = bridge
        self.context = context
        self.help_text = help_text

    def dispatch(self, command: Command, query: str = "") -> int:
        """
        Run a command and return the process exit code.

        Raises FastcdError subclasses on failure; nothing is persisted or
        emitted in that case.
        """
        if command is Command.HELP:
            self.context.console.print(self.help_text.rstrip("\n"))
            return 0

        handler = get_handler(command)
        if handler is None:
            raise ArgumentError(f"Unsupported command: {command.name.lower()}")

        # A stale artifact must never be applied after this run
        self.bridge.clear()

        registry = self.store.load()
        logger.debug(f"Running {command.name.lower()} with query {query!r}")
        outcome = handler(self.context, query, registry)

        if outcome.purge:
            self.store.delete()
        elif outcome.persist:
            self.store.save(outcome.registry)

        if outcome.action is not None:
            self.bridge.emit(outcome.action)

        return outcome.exit_code
