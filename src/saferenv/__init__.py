"""saferenv -- env, but a little safer.

Runs a command in a copy of the current environment in which variables
whose *names* look like secrets have been redacted or removed.

Components
----------
1. Core types, errors, configuration (:mod:`saferenv.core`)
2. Rule set construction and filtering (:mod:`saferenv.filtering`)
3. Exec and printing (:mod:`saferenv.launcher`)
4. Command line (:mod:`saferenv.cli`)
"""
from __future__ import annotations

__version__ = "0.3.0"

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
from saferenv.filtering import (
    DEFAULT_RULES,
    FilterEngine,
    PatternEngine,
    apply_to_environ,
    build_rules,
)

__all__ = [
    "__version__",
    # Config
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
    # Filtering
    "DEFAULT_RULES",
    "build_rules",
    "PatternEngine",
    "FilterEngine",
    "apply_to_environ",
]
