# fastcd/launch.py
"""
Platform launchers and project markers.

Launchers hand a path to the operating system's "open" program. They are
registered by sys.platform prefix and looked up at run time.

Markers inspect a project directory to decide how --open should start it:
a start script, a workspace file or a project file. They are checked in
order and the first one that finds something wins.
"""

import logging
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Type

from .errors import ConfigError, LaunchError

logger = logging.getLogger(__name__)

# Global launcher registry, keyed by sys.platform prefix
_LAUNCHERS: Dict[str, Type["Launcher"]] = {}


class Launcher(ABC):
    """
    Base class for platform launchers.

    Subclasses implement open() to show a path in the desktop environment.
    """

    name: str = "launcher"

    @abstractmethod
    def open(self, path: Path):
        """
        Open a path with the system's default application.

        Args:
            path: File or directory to open
        """
        pass


class CommandLauncher(Launcher):
    """Launcher that spawns a program with the path as its only argument."""

    program: str = ""

    def open(self, path: Path):
        logger.debug(f"Launching {self.program} {path}")
        try:
            subprocess.Popen([self.program, str(path)])
        except OSError as e:
            raise LaunchError(f"Failed to run {self.program}: {e}")


def register_launcher(platform: str) -> Callable:
    """
    Decorator to register a launcher for a sys.platform prefix.

    Usage:
        @register_launcher("darwin")
        class MacLauncher(CommandLauncher):
            ...
    """
    def decorator(cls: Type[Launcher]) -> Type[Launcher]:
        if platform in _LAUNCHERS:
            logger.warning(f"Overwriting launcher for {platform}")
        _LAUNCHERS[platform] = cls
        return cls
    return decorator


@register_launcher("darwin")
class MacLauncher(CommandLauncher):
    name = "macOS open"
    program = "open"


@register_launcher("linux")
class XdgLauncher(CommandLauncher):
    name = "xdg-open"
    program = "xdg-open"


@register_launcher("freebsd")
class BsdLauncher(XdgLauncher):
    pass


class UnsupportedLauncher(Launcher):
    """Stands in on platforms without a known opener."""

    def __init__(self, platform: str):
        self.platform = platform
        self.name = f"unsupported ({platform})"

    def open(self, path: Path):
        raise ConfigError(f"Unsupported OS: {self.platform}")


def get_launcher(platform: str = None) -> Launcher:
    """
    Get the launcher for a platform (default: the current one).

    Returns an UnsupportedLauncher if none is registered.
    """
    platform = platform or sys.platform
    for prefix, launcher_cls in _LAUNCHERS.items():
        if platform.startswith(prefix):
            return launcher_cls()
    return UnsupportedLauncher(platform)


def list_launchers() -> Dict[str, Type[Launcher]]:
    return dict(_LAUNCHERS)


# Project markers

@dataclass
class OpenTarget:
    """What --open found in a project directory."""
    kind: str  # "start", "workspace", "project"
    path: Path


class Marker(ABC):
    """Detects one way of opening a project directory."""

    kind: str = ""

    @abstractmethod
    def detect(self, directory: Path) -> Optional[Path]:
        """Return the file to act on, or None if this marker is absent."""
        pass


class StartScriptMarker(Marker):
    """An executable script at the top of the project."""

    kind = "start"

    def __init__(self, script_name: str = "start"):
        self.script_name = script_name

    def detect(self, directory: Path) -> Optional[Path]:
        script = directory / self.script_name
        if script.is_file() and os.access(script, os.X_OK):
            return script
        return None


class SuffixMarker(Marker):
    """
    Exactly one directory entry with a matching suffix.

    Entries may be files or bundle directories. Several matches are
    ambiguous and count as absent.
    """

    def __init__(self, kind: str, suffixes: Sequence[str]):
        self.kind = kind
        self.suffixes = tuple(suffixes)

    def detect(self, directory: Path) -> Optional[Path]:
        try:
            found = sorted(p for p in directory.iterdir() if p.suffix in self.suffixes)
        except OSError as e:
            logger.debug(f"Cannot scan {directory}: {e}")
            return None
        if len(found) == 1:
            return found[0]
        if found:
            logger.debug(f"{len(found)} {self.kind} files in {directory}, skipping")
        return None


def default_markers(
    start_script: str = "start",
    workspace_suffixes: Sequence[str] = (".xcworkspace", ".code-workspace"),
    project_suffixes: Sequence[str] = (".xcodeproj",),
) -> List[Marker]:
    return [
        StartScriptMarker(start_script),
        SuffixMarker("workspace", workspace_suffixes),
        SuffixMarker("project", project_suffixes),
    ]


def detect_target(directory: Path, markers: Sequence[Marker]) -> Optional[OpenTarget]:
    """First marker found in the directory, or None."""
    for marker in markers:
        path = marker.detect(directory)
        if path is not None:
            logger.debug(f"Detected {marker.kind} marker: {path}")
            return OpenTarget(kind=marker.kind, path=path)
    return None
