# fastcd - Directory bookmarks for the shell
#
# Save directories under short names, then jump to, view, open or edit
# them by full or partial name.
#
# Core concepts:
# - Registry: Saved projects, name -> absolute directory
# - Resolver: Turns a (partial) query into exactly one project, prompting
#   when the query is ambiguous
# - CommandDispatcher: Runs one command and persists the result
# - ShellBridge: Hands a directory change back to the invoking shell

from .registry import Registry, Entry, RegistryStore, FileStore, MemoryStore
from .resolver import Resolver
from .console import Console
from .commands import Command, CommandDispatcher, Context, Outcome
from .bridge import ShellBridge, ShellAction, wrapper_script
from .config import Config, load_config
from .errors import (
    FastcdError,
    ArgumentError,
    NotFoundError,
    ConfigError,
    DirectoryError,
    LaunchError,
    CancelledError,
    StoreError,
    BridgeError,
)

__all__ = [
    # Core
    "Registry",
    "Entry",
    "RegistryStore",
    "FileStore",
    "MemoryStore",
    "Resolver",
    "Console",
    "Command",
    "CommandDispatcher",
    "Context",
    "Outcome",
    "ShellBridge",
    "ShellAction",
    "wrapper_script",
    "Config",
    "load_config",
    # Errors
    "FastcdError",
    "ArgumentError",
    "NotFoundError",
    "ConfigError",
    "DirectoryError",
    "LaunchError",
    "CancelledError",
    "StoreError",
    "BridgeError",
]

__version__ = "0.1.0"
