"""saferenv error-code hierarchy.

Every failure the tool can report is a concrete exception class carrying
the process exit code it maps to.  Exit codes follow ``sysexits.h`` where
a matching code exists and the ``env(1)`` convention (126/127) for a
failed exec.

Hierarchy
---------
::

    SaferEnvError
    +-- ConfigurationError   (SE-E1xx, exit 78)
    +-- UsageError           (SE-E2xx, exit 64)
    +-- DataError            (SE-E3xx, exit 65)
    +-- ExecFailure          (SE-E4xx, exit 126 / 127)

Usage
-----
Raise concrete subclasses directly::

    raise InvalidRulePattern(details={"rule": "cli_explicit_keep"})

Catch by category::

    try:
        ...
    except ConfigurationError:
        # handles InvalidRulePattern
        ...

Messages and details MUST NOT contain environment variable values.
"""
from __future__ import annotations

from typing import Any

# sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_CONFIG = 78

# env(1)
EX_CANNOT_EXECUTE = 126
EX_NOT_FOUND = 127

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class SaferEnvError(Exception):
    """Base exception for all saferenv errors.

    Attributes
    ----------
    code : str
        saferenv error code, e.g. ``"SE-E100"``.
    exit_code : int
        Process exit status reported by the CLI for this error.
    message : str
        Human-readable description (MUST NOT contain variable values).
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    resolution : str
        Suggested action for the caller.
    """

    code: str = "SE-E000"
    exit_code: int = 1
    message: str = "Unknown saferenv error"
    resolution: str = ""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        resolution: str | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        if resolution is not None:
            self.resolution = resolution
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error for structured diagnostics."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "exit_code": self.exit_code,
        }
        if self.details:
            payload["detail"] = self.details
        if self.resolution:
            payload["resolution"] = self.resolution
        return {"error": payload}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ===================================================================
# Category base classes
# ===================================================================


class ConfigurationError(SaferEnvError):
    """SE-E1xx -- The rule set or filter configuration is unusable."""

    code = "SE-E1XX"
    exit_code = EX_CONFIG


class UsageError(SaferEnvError):
    """SE-E2xx -- The command line was invoked incorrectly."""

    code = "SE-E2XX"
    exit_code = EX_USAGE


class DataError(SaferEnvError):
    """SE-E3xx -- Input data cannot be represented for the host OS."""

    code = "SE-E3XX"
    exit_code = EX_DATAERR


class ExecFailure(SaferEnvError):
    """SE-E4xx -- Replacing the process image with the command failed."""

    code = "SE-E400"
    exit_code = EX_CANNOT_EXECUTE
    message = "Failed to execute command"
    resolution = "Check that the command exists and is executable."


# ===================================================================
# Concrete errors
# ===================================================================


class InvalidRulePattern(ConfigurationError):
    """SE-E100 -- A rule pattern is not a valid regular expression."""

    code = "SE-E100"
    message = "Rule pattern could not be compiled"
    resolution = "Fix or remove the offending --keep/--unset name."


class InvalidVerbosity(UsageError):
    """SE-E200 -- Verbosity was requested beyond the supported maximum."""

    code = "SE-E200"
    message = "verbosity level cannot be greater than 3 (-vvv)"
    resolution = "Pass -v at most three times."


class CommandEncodingError(DataError):
    """SE-E300 -- A command argument contains an embedded NUL byte."""

    code = "SE-E300"
    message = "Command argument cannot be passed to the operating system"
    resolution = "Remove NUL characters from the command and its arguments."


class CommandNotFound(ExecFailure):
    """SE-E401 -- The command was not found on ``PATH``."""

    code = "SE-E401"
    exit_code = EX_NOT_FOUND
    message = "Command not found"
    resolution = "Check the command name and the PATH of the filtered environment."


class NameDecodeError(SaferEnvError):
    """SE-E500 -- A variable name is not valid UTF-8 text.

    Recoverable: the filter engine catches this per variable, logs a
    warning, and leaves the variable untouched.
    """

    code = "SE-E500"
    message = "Environment variable name is not valid UTF-8"
