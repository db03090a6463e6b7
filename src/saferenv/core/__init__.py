"""Core types, errors and configuration shared by every saferenv module."""
from __future__ import annotations

from saferenv.core.config import DEFAULT_REDACT_VALUE, SaferEnvConfig
from saferenv.core.errors import (
    CommandEncodingError,
    CommandNotFound,
    ConfigurationError,
    DataError,
    ExecFailure,
    InvalidRulePattern,
    InvalidVerbosity,
    NameDecodeError,
    SaferEnvError,
    UsageError,
)
from saferenv.core.types import (
    FilterDecision,
    FilterOutcome,
    FilterReport,
    Rule,
    RuleAction,
    RuleSet,
)

__all__ = [
    "DEFAULT_REDACT_VALUE",
    "SaferEnvConfig",
    # Errors
    "SaferEnvError",
    "ConfigurationError",
    "UsageError",
    "DataError",
    "ExecFailure",
    "InvalidRulePattern",
    "InvalidVerbosity",
    "CommandEncodingError",
    "CommandNotFound",
    "NameDecodeError",
    # Types
    "Rule",
    "RuleAction",
    "RuleSet",
    "FilterOutcome",
    "FilterDecision",
    "FilterReport",
]
