# crossrun/exceptions.py
"""
Custom exception hierarchy for crossrun.

All crossrun-specific exceptions inherit from CrossRunError to enable
catch-all error handling while still providing specific exception types
for different error conditions.
"""

from __future__ import annotations


class CrossRunError(Exception):
    """
    Base exception for all crossrun errors.

    Catch this to handle any crossrun-specific error.
    """

    reported: bool = False
    """True once a diagnostic for this error was already written to stderr."""


class ConfigValidationError(CrossRunError):
    """
    Raised when run configuration is invalid.

    Example:
        >>> RunConfig(package_manager="bun")
        ConfigValidationError: Invalid package manager bun
    """

    pass


class ConfigConflictError(ConfigValidationError):
    """Raised when sequential and concurrent modes are both requested."""

    def __init__(self, message: str = "Cannot use both --multiple and --parallel"):
        super().__init__(message)


class UnknownVariableError(CrossRunError):
    """
    Raised by strict expansion when a referenced variable is not set.

    Attributes:
        name: The variable name that could not be resolved
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown environment variable {name}")


class NoScriptMatchedError(CrossRunError):
    """
    Raised when a glob script reference matches no declared script.

    Attributes:
        pattern: The glob pattern that matched nothing
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"No scripts matched {pattern}")


class NoPackageManagerError(CrossRunError):
    """Raised when an `npm:` command runs but no package manager was resolved."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Can't run {command}, no package manager available")


class SpawnFailureError(CrossRunError):
    """
    Raised when the operating system refuses to launch a command.

    This is for launch-level failures, not commands that ran and failed
    (those are NonZeroExitError).
    """

    def __init__(self, command: str, cause: BaseException):
        self.command = command
        self.cause = cause
        super().__init__(str(cause) or f"Failed to start {command}")


class NonZeroExitError(CrossRunError):
    """
    Raised when a command ran to completion with a failing exit code.

    Attributes:
        command: The command line that was executed
        exit_code: The exit code reported by the shell
    """

    def __init__(self, command: str, exit_code: int):
        self.command = command
        self.exit_code = exit_code
        super().__init__(f"Command exited with code {exit_code}.")
