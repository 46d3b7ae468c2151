# fastcd/errors.py
"""
Error kinds raised by fastcd.

Every error is terminal: the CLI prints the message to stderr and exits
with the kind's exit code.
"""


class FastcdError(Exception):
    """Base class for all fastcd errors."""
    exit_code = 1


class ArgumentError(FastcdError):
    """Malformed command-line invocation."""


class NotFoundError(FastcdError):
    """Query matched nothing, or there are no saved projects."""


class ConfigError(FastcdError):
    """Required configuration is missing or invalid."""


class DirectoryError(FastcdError):
    """A project directory could not be entered."""


class LaunchError(FastcdError):
    """An external program could not be started."""


class CancelledError(FastcdError):
    """The user aborted an interactive prompt."""


class StoreError(FastcdError):
    """The backing store could not be read, parsed or written."""
    exit_code = 2


class BridgeError(FastcdError):
    """The shell bridge artifact could not be written."""
    exit_code = 2
