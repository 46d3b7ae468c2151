# fastcd/console.py
"""
Interactive console: prompts, confirmations and terminal styling.
"""

import sys
from typing import Optional, TextIO

from .errors import CancelledError

BOLD = "\x1b[1m"
RESET = "\x1b[0m"


class Console:
    """
    Line-oriented user interaction over a pair of text streams.

    Args:
        stdin: Input stream (default: sys.stdin)
        stdout: Output stream (default: sys.stdout)
        styled: Force bold styling on or off (default: only on a terminal)
    """

    def __init__(self, stdin: TextIO = None, stdout: TextIO = None, styled: Optional[bool] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        if styled is None:
            isatty = getattr(self.stdout, "isatty", None)
            styled = bool(isatty and isatty())
        self.styled = styled

    def print(self, text: str = ""):
        self.stdout.write(f"{text}\n")
        self.stdout.flush()

    def bold(self, text: str) -> str:
        if not self.styled:
            return text
        return f"{BOLD}{text}{RESET}"

    def ask(self, prompt: str) -> str:
        """
        Show a prompt and read one line of input.

        Trailing whitespace is stripped. End of input or an interrupt
        raises CancelledError.
        """
        self.stdout.write(prompt)
        self.stdout.flush()
        try:
            line = self.stdin.readline()
        except KeyboardInterrupt:
            self.stdout.write("\n")
            raise CancelledError("Cancelled")
        if not line:
            self.stdout.write("\n")
            raise CancelledError("Cancelled")
        return line.rstrip()

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question. Anything but y/yes means no."""
        answer = self.ask(f"{message} (y/N)? ")
        return answer.strip().lower() in ("y", "yes")
