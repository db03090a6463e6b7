"""saferenv shared domain types.

Key design decisions:
* ``Rule`` is a frozen, slotted dataclass: rules are immutable once built.
* ``RuleSet`` is a plain ``tuple`` so evaluation order is fixed at
  construction time and cannot be reordered by callers.
* Enums use *string* values so they read cleanly in log output.
* ``FilterReport`` records names and outcomes only; it never holds values.
"""
from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RuleAction(enum.StrEnum):
    """What to do with a variable whose name matches a rule."""

    KEEP = "keep"
    REDACT = "redact"
    UNSET = "unset"


class FilterOutcome(enum.StrEnum):
    """Final state of one examined variable after a filter pass."""

    KEPT = "kept"
    REDACTED = "redacted"
    REMOVED = "removed"
    SKIPPED = "skipped"


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Rule:
    """A single name-matching rule.

    Attributes
    ----------
    name:
        Diagnostic label, e.g. ``"generic_token"``.  Not used for matching.
    pattern:
        Regular expression searched case-insensitively in the variable name.
    action:
        The :class:`RuleAction` applied when the pattern matches.
    """

    name: str
    pattern: str
    action: RuleAction


RuleSet = tuple[Rule, ...]
"""Ordered, immutable sequence of rules.  The first match wins."""


# ---------------------------------------------------------------------------
# Filter results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FilterDecision:
    """Outcome for one variable name.

    ``rule`` is the label of the deciding rule, or ``None`` when the
    residual policy applied (or the name was skipped).
    """

    key: str
    outcome: FilterOutcome
    rule: str | None = None


@dataclass(slots=True)
class FilterReport:
    """Per-variable decisions from a single filter pass, in examination order."""

    decisions: list[FilterDecision] = field(default_factory=list)

    def record(
        self,
        key: str,
        outcome: FilterOutcome,
        rule: str | None = None,
    ) -> None:
        self.decisions.append(FilterDecision(key=key, outcome=outcome, rule=rule))

    def keys_with(self, outcome: FilterOutcome) -> list[str]:
        """Return the names that ended in *outcome*."""
        return [d.key for d in self.decisions if d.outcome is outcome]

    @property
    def counts(self) -> dict[FilterOutcome, int]:
        """Return the number of variables per outcome."""
        tally = Counter(d.outcome for d in self.decisions)
        return {outcome: tally.get(outcome, 0) for outcome in FilterOutcome}

    def __len__(self) -> int:
        return len(self.decisions)
