"""Rule set construction.

Builds the ordered rule sequence evaluated by the filter engine:

1. one ``keep`` rule per explicit ``--keep`` name,
2. one ``unset`` rule per explicit ``--unset`` name,
3. the built-in default ``redact`` rules, in fixed order.

Explicit rules always come first so that ``--keep NAME`` beats a default
pattern that would otherwise redact ``NAME``.
"""
from __future__ import annotations

import re
from collections.abc import Iterable

from saferenv.core.types import Rule, RuleAction, RuleSet

KEEP_RULE_NAME = "cli_explicit_keep"
UNSET_RULE_NAME = "cli_explicit_unset"

# ---------------------------------------------------------------------------
# Default rules
# ---------------------------------------------------------------------------

DEFAULT_RULES: RuleSet = (
    Rule(
        name="generic_secret",
        pattern=r"(^|[_-])SECRETS?$",
        action=RuleAction.REDACT,
    ),
    Rule(
        name="generic_token",
        pattern=r"(^|[_-])TOKENS?$",
        action=RuleAction.REDACT,
    ),
    Rule(
        name="generic_key",
        pattern=r"(^|[_-])KEYS?$",
        action=RuleAction.REDACT,
    ),
    Rule(
        name="generic_password",
        pattern=r"(^|[_-])PASSWORDS?$",
        action=RuleAction.REDACT,
    ),
    Rule(
        name="generic_pw",
        pattern=r"[_-]PW$",
        action=RuleAction.REDACT,
    ),
)


def literal_name_pattern(name: str) -> str:
    """Return a pattern matching exactly *name* and nothing else.

    Regex metacharacters are escaped, so ``FOO.BAR`` does not match
    ``FOOXBAR``, and the result is anchored at both ends so ``TOKEN``
    does not match ``MY_TOKEN``.
    """
    return f"^{re.escape(name)}$"


def build_rules(
    keep_names: Iterable[str] = (),
    unset_names: Iterable[str] = (),
    *,
    defaults: Iterable[Rule] = DEFAULT_RULES,
) -> RuleSet:
    """Build the rule set for one invocation.

    Parameters
    ----------
    keep_names:
        Literal variable names that must be left untouched.
    unset_names:
        Literal variable names that must be removed.
    defaults:
        Rules appended after the explicit ones.  Defaults to
        :data:`DEFAULT_RULES`.

    Returns
    -------
    RuleSet
        Keep rules, then unset rules, then *defaults*, each group in the
        order supplied.
    """
    rules: list[Rule] = []
    for name in keep_names:
        rules.append(
            Rule(
                name=KEEP_RULE_NAME,
                pattern=literal_name_pattern(name),
                action=RuleAction.KEEP,
            )
        )
    for name in unset_names:
        rules.append(
            Rule(
                name=UNSET_RULE_NAME,
                pattern=literal_name_pattern(name),
                action=RuleAction.UNSET,
            )
        )
    rules.extend(defaults)
    return tuple(rules)
