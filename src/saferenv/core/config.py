"""saferenv run configuration.

Defines the validated configuration model built once per invocation from
the command line.  Nothing is persisted between invocations.
"""
from __future__ import annotations

import argparse

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_REDACT_VALUE = "[REDACTED]"


class SaferEnvConfig(BaseModel):
    """Configuration for a single saferenv invocation.

    All fields carry defaults so that an empty configuration behaves like
    ``saferenv`` with no options: default redaction rules, inherited
    environment, and the environment printed instead of a command run.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    ignore_environment: bool = Field(
        default=False,
        description=(
            "Start from an empty environment: only variables kept "
            "explicitly survive."
        ),
    )
    keep: list[str] = Field(
        default_factory=list,
        description="Literal variable names that are never redacted or unset.",
    )
    unset: list[str] = Field(
        default_factory=list,
        description="Literal variable names removed from the environment.",
    )
    redact_value: str = Field(
        default=DEFAULT_REDACT_VALUE,
        description="Placeholder substituted for redacted values.",
    )
    verbosity: int = Field(
        default=0,
        ge=0,
        description="Log verbosity (0=warn, 1=info, 2=debug, 3=trace).",
    )
    command: list[str] | None = Field(
        default=None,
        description=(
            "Program followed by its arguments.  ``None`` prints the "
            "resulting environment instead."
        ),
    )

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> SaferEnvConfig:
        """Build a configuration from parsed command-line arguments."""
        command = list(args.command) if args.command else None
        return cls(
            ignore_environment=bool(args.ignore_environment),
            keep=list(args.keep or []),
            unset=list(args.unset or []),
            redact_value=args.redact_value,
            verbosity=args.verbosity,
            command=command,
        )
