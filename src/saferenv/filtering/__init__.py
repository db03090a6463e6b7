"""Rule set construction and environment filtering.

* **build_rules** / **DEFAULT_RULES** -- the ordered rule set: explicit
  keep rules, explicit unset rules, then built-in redaction rules.
* **PatternEngine** -- cached, case-insensitive pattern compilation.
* **FilterEngine** -- first-match-wins evaluation of the rule set over an
  environment mapping, with the ``ignore_environment`` residual policy.
* **apply_to_environ** -- filter ``os.environ`` in place.
"""
from __future__ import annotations

from saferenv.filtering.engine import (
    FilterEngine,
    apply_to_environ,
    decode_name,
    warn_if_non_utf8_locale,
)
from saferenv.filtering.pattern_engine import PatternEngine
from saferenv.filtering.rules import (
    DEFAULT_RULES,
    KEEP_RULE_NAME,
    UNSET_RULE_NAME,
    build_rules,
    literal_name_pattern,
)

__all__ = [
    "DEFAULT_RULES",
    "KEEP_RULE_NAME",
    "UNSET_RULE_NAME",
    "build_rules",
    "literal_name_pattern",
    "PatternEngine",
    "FilterEngine",
    "apply_to_environ",
    "decode_name",
    "warn_if_non_utf8_locale",
]
