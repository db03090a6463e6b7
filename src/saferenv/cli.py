"""Command-line interface: ``saferenv [OPTIONS] [COMMAND [ARGS...]]``."""

from __future__ import annotations

import argparse
import logging
import sys

from saferenv import __version__
from saferenv.core.config import DEFAULT_REDACT_VALUE, SaferEnvConfig
from saferenv.core.errors import EX_OK, InvalidVerbosity, SaferEnvError
from saferenv.core.log import setup_logging
from saferenv.filtering.engine import (
    FilterEngine,
    apply_to_environ,
    warn_if_non_utf8_locale,
)
from saferenv.filtering.rules import build_rules
from saferenv.launcher import exec_command, print_environment, validate_command

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saferenv",
        description=(
            "env but a little safer: run COMMAND with secret-looking "
            "environment variables redacted."
        ),
    )
    env_group = parser.add_argument_group("env options")
    env_group.add_argument(
        "-i",
        "--ignore-environment",
        action="store_true",
        default=False,
        help="Start with an empty environment.",
    )
    env_group.add_argument(
        "-u",
        "--unset",
        action="append",
        default=None,
        metavar="NAME",
        help="Remove variable from the environment (--keep has higher priority).",
    )
    saferenv_group = parser.add_argument_group("saferenv options")
    saferenv_group.add_argument(
        "-k",
        "--keep",
        action="append",
        default=None,
        metavar="NAME",
        help="Prevent variable from being redacted or unset.",
    )
    saferenv_group.add_argument(
        "-r",
        "--redact-value",
        default=DEFAULT_REDACT_VALUE,
        metavar="VALUE",
        help=f"Set any redacted variables to this value (default: {DEFAULT_REDACT_VALUE}).",
    )
    parser.add_argument(
        "-v",
        "--debug",
        action="count",
        default=0,
        dest="verbosity",
        help="Print more detailed logs (repeat up to 3 times: -v, -vv, -vvv).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        metavar="COMMAND",
        help=(
            "The COMMAND to run in the resulting environment. "
            "If no COMMAND, print the resulting environment."
        ),
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse *argv*, normalising the trailing command."""
    args = _build_parser().parse_args(argv)
    command = list(args.command or [])
    if command and command[0] == "--":
        command = command[1:]
    args.command = command or None
    return args


def _report(exc: SaferEnvError) -> int:
    """Log *exc* with its resolution hint and return its exit code."""
    logger.error("%s", exc.message)
    if exc.resolution:
        logger.error("%s", exc.resolution)
    logger.debug("%r", exc.to_dict())
    return exc.exit_code


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv:
        Command-line arguments.  Defaults to ``sys.argv[1:]``.

    Returns
    -------
    int
        0 on success, otherwise the ``exit_code`` of the
        :class:`~saferenv.core.errors.SaferEnvError` that stopped the run.
        Does not return when a command is executed successfully.
    """
    args = parse_args(argv)

    try:
        setup_logging(args.verbosity)
    except InvalidVerbosity as exc:
        # Logging is not configured yet.
        print(f"saferenv: {exc.message}", file=sys.stderr)
        if exc.resolution:
            print(f"saferenv: {exc.resolution}", file=sys.stderr)
        return exc.exit_code
    logger.debug("Logging initialized at level %d", args.verbosity)

    warn_if_non_utf8_locale()

    config = SaferEnvConfig.from_namespace(args)
    logger.debug("%r", config)

    # Everything that can fail is checked before the environment changes.
    try:
        if config.command is not None:
            validate_command(config.command)
        rules = build_rules(config.keep, config.unset)
        engine = FilterEngine(
            rules,
            ignore_environment=config.ignore_environment,
            redact_value=config.redact_value,
        )
    except SaferEnvError as exc:
        return _report(exc)

    logger.debug("Rules: %r", engine.rules)
    apply_to_environ(engine)

    if config.command is None:
        logger.info("No command provided. Printing environment variables")
        print_environment()
        return EX_OK

    try:
        exec_command(config.command)
    except SaferEnvError as exc:
        return _report(exc)


def run() -> None:
    """Console-script entrypoint."""
    sys.exit(main())
