"""Process replacement and environment printing.

Once the environment has been filtered, saferenv either replaces itself
with the requested command (``exec``) or prints the surviving variables.
"""
from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import NoReturn, TextIO

from saferenv.core.errors import CommandEncodingError, CommandNotFound, ExecFailure
from saferenv.core.log import TRACE

logger = logging.getLogger(__name__)


def validate_command(command: Sequence[str]) -> None:
    """Check that *command* can be handed to ``execvp``.

    Raises
    ------
    CommandEncodingError
        If the command is empty or any element contains a NUL character.
    """
    if not command:
        raise CommandEncodingError("Command is empty")
    for index, arg in enumerate(command):
        if "\x00" in arg:
            raise CommandEncodingError(
                f"Command argument {index} contains an embedded NUL character",
                details={"index": index},
            )


def exec_command(
    command: Sequence[str],
    env: Mapping[str, str] | None = None,
) -> NoReturn:
    """Replace the current process with *command*.

    ``command[0]`` is looked up on ``PATH`` and is also passed as
    ``argv[0]``.  Only returns by raising.

    Raises
    ------
    CommandEncodingError
        If an argument cannot be passed to the operating system.
    CommandNotFound
        If the program does not exist.
    ExecFailure
        If the program exists but cannot be executed.
    """
    validate_command(command)
    argv = list(command)
    logger.log(TRACE, "argv: %r", argv)
    logger.info("Executing command...")
    try:
        os.execvpe(argv[0], argv, os.environ if env is None else env)
    except FileNotFoundError as exc:
        raise CommandNotFound(
            f"{argv[0]}: command not found",
            details={"program": argv[0]},
        ) from exc
    except OSError as exc:
        raise ExecFailure(
            f"{argv[0]}: {exc.strerror or exc}",
            details={"program": argv[0], "errno": exc.errno},
        ) from exc
    # execvpe only returns by raising.
    raise ExecFailure(details={"program": argv[0]})


def print_environment(
    env: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> None:
    """Write each ``name=value`` pair of *env* on its own line.

    When *stream* exposes a binary ``buffer`` the pairs are written as the
    raw OS bytes, so names and values that are not valid UTF-8 come out
    exactly as they went in.
    """
    if env is None:
        env = os.environ
    if stream is None:
        stream = sys.stdout

    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        for key, value in env.items():
            stream.write(f"{key}={value}\n")
        return

    stream.flush()
    for key, value in env.items():
        buffer.write(os.fsencode(key) + b"=" + os.fsencode(value) + b"\n")
    buffer.flush()
