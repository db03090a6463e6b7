"""Case-insensitive pattern compilation for rule matching.

Patterns are compiled once and cached at module level.  A pattern that
fails to compile is a fatal configuration error: no filtering is
attempted with a rule set that might be broken.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Any

from saferenv.core.errors import InvalidRulePattern
from saferenv.core.log import TRACE
from saferenv.core.types import Rule

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Compiled pattern cache (module-level)
# ---------------------------------------------------------------------------

@lru_cache(maxsize=512)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile and cache *pattern* case-insensitively.

    Raises
    ------
    re.error
        If the pattern is syntactically invalid.
    """
    return re.compile(pattern, re.IGNORECASE)


# ---------------------------------------------------------------------------
# PatternEngine
# ---------------------------------------------------------------------------


class PatternEngine:
    """Compile and evaluate rule patterns against variable names."""

    def compile(self, pattern: str) -> re.Pattern[str]:
        """Compile *pattern*.  Raises ``re.error`` if it is invalid."""
        return _compile_pattern(pattern)

    def compile_rules(
        self,
        rules: Iterable[Rule],
    ) -> list[tuple[Rule, re.Pattern[str]]]:
        """Compile every rule's pattern, preserving rule order.

        Raises
        ------
        InvalidRulePattern
            On the first rule whose pattern does not compile.
        """
        compiled: list[tuple[Rule, re.Pattern[str]]] = []
        for index, rule in enumerate(rules):
            try:
                compiled.append((rule, self.compile(rule.pattern)))
            except re.error as exc:
                raise InvalidRulePattern(
                    f"Rule {rule.name!r} has an invalid pattern: {exc}",
                    details={
                        "rule": rule.name,
                        "index": index,
                        "pattern": rule.pattern,
                    },
                ) from exc
            logger.log(TRACE, "Compiled rule %s: %r", rule.name, rule.pattern)
        return compiled

    def match(self, pattern: str, text: str) -> bool:
        """Return ``True`` if *pattern* matches anywhere in *text*."""
        return self.compile(pattern).search(text) is not None

    # -- cache management ---------------------------------------------------

    @staticmethod
    def clear_cache() -> None:
        """Clear the compiled pattern cache."""
        _compile_pattern.cache_clear()

    @staticmethod
    def cache_info() -> Any:
        """Return cache statistics."""
        return _compile_pattern.cache_info()
