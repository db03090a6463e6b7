"""Environment filter engine.

Evaluates every variable name against an ordered rule set and applies the
first matching rule's action:

* ``keep``   -- leave the variable untouched.
* ``redact`` -- replace the value with the redaction placeholder, or
  remove the variable when ``ignore_environment`` is set.
* ``unset``  -- remove the variable.

Names matched by no rule are removed when ``ignore_environment`` is set
and left untouched otherwise.

The engine operates on an explicit mutable mapping so it can be exercised
without touching the process environment.  :func:`apply_to_environ` is the
single load/store point against ``os.environ``.

Names are snapshotted before any mutation; deleting one variable never
perturbs the evaluation of another in the same pass.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

from saferenv.core.config import DEFAULT_REDACT_VALUE
from saferenv.core.errors import NameDecodeError
from saferenv.core.log import TRACE
from saferenv.core.types import FilterOutcome, FilterReport, Rule, RuleAction
from saferenv.filtering.pattern_engine import PatternEngine

logger = logging.getLogger(__name__)


def _printable(key: str | bytes) -> str:
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="backslashreplace")
    return key.encode("utf-8", errors="backslashreplace").decode("utf-8")


def decode_name(key: str | bytes) -> str:
    """Return *key* as UTF-8 text.

    ``bytes`` names must decode as strict UTF-8.  ``str`` names must be
    encodable as strict UTF-8, which rejects the lone surrogates Python
    uses to carry undecodable bytes in ``os.environ``.

    Raises
    ------
    NameDecodeError
        If *key* is not valid UTF-8 text.
    """
    try:
        if isinstance(key, bytes):
            return key.decode("utf-8")
        key.encode("utf-8")
    except UnicodeError as exc:
        raise NameDecodeError(details={"name": _printable(key)}) from exc
    return key


class FilterEngine:
    """Apply a rule set to an environment mapping.

    All rule patterns are compiled in the constructor, so an invalid
    pattern raises :class:`~saferenv.core.errors.InvalidRulePattern`
    before any variable is touched.

    Typical usage::

        engine = FilterEngine(build_rules(keep_names=["GITHUB_TOKEN"]))
        env = {"GITHUB_TOKEN": "t", "NPM_TOKEN": "n", "HOME": "/root"}
        engine.apply(env)
        # env == {"GITHUB_TOKEN": "t", "NPM_TOKEN": "[REDACTED]", "HOME": "/root"}
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        *,
        ignore_environment: bool = False,
        redact_value: str = DEFAULT_REDACT_VALUE,
        pattern_engine: PatternEngine | None = None,
    ) -> None:
        self._patterns = pattern_engine or PatternEngine()
        self._compiled = self._patterns.compile_rules(rules)
        self.ignore_environment = ignore_environment
        self.redact_value = redact_value

    @property
    def rules(self) -> tuple[Rule, ...]:
        """Return the rules in evaluation order."""
        return tuple(rule for rule, _ in self._compiled)

    def first_match(self, name: str) -> Rule | None:
        """Return the first rule whose pattern matches *name*, or ``None``."""
        for rule, compiled in self._compiled:
            logger.log(TRACE, "Checking rule %s", rule.name)
            if compiled.search(name) is not None:
                return rule
        return None

    def apply(self, env: MutableMapping[Any, Any]) -> FilterReport:
        """Filter *env* in place and return a report of every decision.

        Parameters
        ----------
        env:
            Mapping of variable name to value.  Names may be ``str`` or
            ``bytes``; values are written back as ``redact_value`` with
            the same type as the existing value.

        Returns
        -------
        FilterReport
            One decision per name present when the pass started.
        """
        if self.ignore_environment:
            logger.info(
                "ignore_environment is on. All variables will be removed "
                "unless kept explicitly"
            )

        report = FilterReport()
        for key in list(env):
            logger.log(TRACE, "Processing key: %r", key)
            try:
                name = decode_name(key)
            except NameDecodeError as exc:
                logger.warning(
                    "Skip processing non UTF-8 key: %s", exc.details["name"]
                )
                report.record(exc.details["name"], FilterOutcome.SKIPPED)
                continue

            rule = self.first_match(name)
            if rule is None:
                if self.ignore_environment:
                    logger.log(
                        TRACE,
                        "ignore_environment is on. Removing key %r",
                        name,
                    )
                    del env[key]
                    report.record(name, FilterOutcome.REMOVED)
                else:
                    report.record(name, FilterOutcome.KEPT)
                continue

            logger.info(
                "Key %r matched rule %r. Will take action %r",
                name,
                rule.name,
                rule.action.value,
            )
            report.record(name, self._take_action(env, key, rule.action), rule.name)

        counts = report.counts
        logger.debug(
            "Filtered %d variables: %d kept, %d redacted, %d removed, %d skipped",
            len(report),
            counts[FilterOutcome.KEPT],
            counts[FilterOutcome.REDACTED],
            counts[FilterOutcome.REMOVED],
            counts[FilterOutcome.SKIPPED],
        )
        return report

    def _take_action(
        self,
        env: MutableMapping[Any, Any],
        key: Any,
        action: RuleAction,
    ) -> FilterOutcome:
        if action is RuleAction.KEEP:
            return FilterOutcome.KEPT
        if action is RuleAction.REDACT and not self.ignore_environment:
            if isinstance(env[key], bytes):
                env[key] = self.redact_value.encode("utf-8")
            else:
                env[key] = self.redact_value
            return FilterOutcome.REDACTED
        # UNSET, or REDACT when starting from an empty environment.
        del env[key]
        return FilterOutcome.REMOVED


# ---------------------------------------------------------------------------
# Process boundary
# ---------------------------------------------------------------------------


def apply_to_environ(
    engine: FilterEngine,
    environ: MutableMapping[str, str] | None = None,
) -> FilterReport:
    """Filter the process environment (or *environ*) in place.

    The variables are copied into a plain ``dict``, filtered there, and
    the differences are written back: removed names are deleted and
    redacted values are overwritten.  Writing through ``os.environ`` keeps
    the C-level environment in sync for a subsequent ``exec``.
    """
    if environ is None:
        environ = os.environ
    filtered = dict(environ)
    report = engine.apply(filtered)

    for key in list(environ):
        if key not in filtered:
            del environ[key]
        elif environ[key] != filtered[key]:
            environ[key] = filtered[key]
    return report


def warn_if_non_utf8_locale(environ: Mapping[str, str] | None = None) -> bool:
    """Warn when ``LANG`` names a non UTF-8 locale.

    Returns ``True`` if a warning was emitted.  An unset ``LANG`` is not
    warned about.
    """
    if environ is None:
        environ = os.environ
    lang = environ.get("LANG")
    if lang is None:
        return False
    logger.debug("LANG=%r", lang)
    if lang.upper().endswith((".UTF-8", ".UTF8")):
        return False
    logger.warning(
        "Non UTF-8 environment detected. Only UTF-8 is currently supported "
        "and errors may occur."
    )
    return True
