# fastcd/bridge.py
"""
Shell bridge.

A child process cannot change its parent shell's working directory, so
fastcd leaves the action in a well-known file and the shell wrapper
function applies it after the process exits:

    fastcd writes artifact -> exits 0 -> wrapper reads, deletes, applies

The artifact is one line: either an absolute directory to cd into, or a
complete shell command to evaluate. A leading slash marks a directory; it
is never evaluated, even when the directory no longer exists. The wrapper
ignores the artifact unless the process succeeded.
"""

import logging
import os
import shlex
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import BridgeError

logger = logging.getLogger(__name__)

ARTIFACT_NAME = "fastcd_cmd"
FUNCTION_NAME = "f"
BINARY_NAME = "fastcd"


def default_artifact_path() -> Path:
    return Path(tempfile.gettempdir()) / ARTIFACT_NAME


@dataclass(frozen=True)
class ShellAction:
    """
    Something only the invoking shell can do.

    Attributes:
        kind: "cd" for a directory change, "eval" for a shell command
        payload: Absolute directory or command line
    """
    kind: str
    payload: str

    @classmethod
    def change_directory(cls, path: Path | str) -> "ShellAction":
        return cls(kind="cd", payload=str(path))

    @classmethod
    def command(cls, line: str) -> "ShellAction":
        return cls(kind="eval", payload=line)

    @classmethod
    def run_in(cls, directory: Path | str, program: str, target: Path | str) -> "ShellAction":
        """cd into a directory, then run a program against a path."""
        directory = shlex.quote(str(directory))
        target = shlex.quote(str(target))
        return cls.command(f"cd -- {directory} && {program} {target}")

    def render(self) -> str:
        if "\n" in self.payload:
            raise BridgeError("Shell action must be a single line")
        # The wrapper tells the kinds apart by a leading slash
        if self.kind == "cd" and not self.payload.startswith("/"):
            raise BridgeError(f"Directory must be absolute: {self.payload}")
        if self.kind == "eval" and self.payload.startswith("/"):
            raise BridgeError(f"Shell command must not start with a path: {self.payload}")
        return self.payload


class ShellBridge:
    """
    Writer (and reference reader) of the shell bridge artifact.

    Args:
        path: Artifact location shared with the wrapper function
    """

    def __init__(self, path: Path | str = None):
        self.path = Path(path) if path is not None else default_artifact_path()

    def emit(self, action: ShellAction):
        """Write the action for the wrapper to apply."""
        text = action.render() + "\n"
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise BridgeError(f"Failed to communicate with shell: {e}")
        logger.debug(f"Emitted {action.kind} action to {self.path}")

    def clear(self) -> bool:
        """Remove a leftover artifact from an earlier run."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise BridgeError(f"Failed to clear {self.path}: {e}")
        logger.debug(f"Cleared stale artifact {self.path}")
        return True

    def consume(self, exit_code: int) -> Optional[str]:
        """
        Read and delete the artifact, as the wrapper does.

        Returns None when the process failed or nothing was written.
        """
        if exit_code != 0:
            return None
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        self.path.unlink()
        return text.rstrip("\n")


_POSIX_WRAPPER = """\
{function}() {{
    command {binary} "$@"
    local rc=$?
    local bridge={artifact}
    if [ $rc -eq 0 ] && [ -f "$bridge" ]; then
        local action
        action=$(cat "$bridge")
        rm -f "$bridge"
        case "$action" in
            /*) cd -- "$action" ;;
            *) eval "$action" ;;
        esac
    fi
    return $rc
}}
"""

_FISH_WRAPPER = """\
function {function}
    command {binary} $argv
    set -l code $status
    set -l bridge {artifact}
    if test $code -eq 0; and test -f $bridge
        set -l action (cat $bridge)
        rm -f $bridge
        if string match -q -- "/*" "$action"
            cd -- "$action"
        else
            eval $action
        end
    end
    return $code
end
"""

WRAPPERS = {
    "bash": _POSIX_WRAPPER,
    "zsh": _POSIX_WRAPPER,
    "sh": _POSIX_WRAPPER,
    "fish": _FISH_WRAPPER,
}


def wrapper_script(shell: str, artifact: Path | str = None) -> str:
    """
    Shell function that runs fastcd and applies its artifact.

    Args:
        shell: bash, zsh, sh or fish
        artifact: Artifact path (default: the standard temp location)
    """
    template = WRAPPERS.get(shell)
    if template is None:
        raise ValueError(f"Unsupported shell: {shell}")
    artifact = Path(artifact) if artifact is not None else default_artifact_path()
    return template.format(
        function=FUNCTION_NAME,
        binary=BINARY_NAME,
        artifact=shlex.quote(str(artifact)),
    )
