"""
Rule engine: decides whether a transaction is hidden and which category it
gets, from its description and the user's keyword rules.

Rules are matched on whole words: the keyword has to sit between the start
of the text or a non-word character and a non-word character or the end,
so "CAT" matches "CAT FOOD" but not "CATALOG". Keywords are regex-escaped,
so any literal keyword is safe.

The ignore and categorize decisions are independent slots. Walking the
rules from highest priority down, the first matching ignore rule hides the
transaction and the first matching categorize rule sets its category; one
description can trigger both.

This module is the only place rules are matched. Imports and bulk
re-application both go through resolve_rules().
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from ..logging_setup import get_logger
from ..schemas.rule import Rule, RuleAction

logger = get_logger(__name__)

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class RuleResolution:
    """Result of running the rules over one description."""
    ignore: bool
    category: str


@dataclass(frozen=True)
class CompiledRule:
    rule: Rule
    pattern: re.Pattern


class CompiledRuleSet(tuple):
    """Enabled rules in evaluation order with their patterns compiled."""
    __slots__ = ()


def keyword_pattern(keyword: str, case_sensitive: bool = False) -> re.Pattern:
    """Compile the whole-word pattern for a literal keyword."""
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(rf"(?:^|\W){re.escape(keyword)}(?:\W|$)", flags)


def matches_keyword(description: str, keyword: str, case_sensitive: bool = False) -> bool:
    """Check a single keyword against a description."""
    if not description or not keyword:
        return False
    return keyword_pattern(keyword, case_sensitive).search(description) is not None


def _evaluation_order(rules: Iterable[Rule]) -> list[Rule]:
    # Priority descending, then id ascending (rules without an id after
    # those with one), then the order they were given in.
    indexed = list(enumerate(rules))
    indexed.sort(
        key=lambda pair: (
            -pair[1].priority,
            pair[1].id is None,
            pair[1].id if pair[1].id is not None else 0,
            pair[0],
        )
    )
    return [rule for _, rule in indexed]


def compile_rules(rules: Iterable[Rule]) -> CompiledRuleSet:
    """
    Snapshot a rule list for repeated use.

    Disabled rules and rules with a blank keyword are dropped.
    """
    if isinstance(rules, CompiledRuleSet):
        return rules
    enabled = [r for r in rules if r.enabled and r.keyword]
    return CompiledRuleSet(
        CompiledRule(rule=r, pattern=keyword_pattern(r.keyword, r.case_sensitive))
        for r in _evaluation_order(enabled)
    )


def resolve_rules(
    description: str | None,
    default_category: str | None,
    rules: Iterable[Rule] | CompiledRuleSet,
) -> RuleResolution:
    """
    Run the rules over a description.

    When no categorize rule matches, the category falls back to
    default_category, then to "Uncategorized". An empty description never
    matches. Unexpected errors are logged and treated as no match.
    """
    fallback = default_category or UNCATEGORIZED

    if not description:
        return RuleResolution(ignore=False, category=fallback)

    try:
        compiled = compile_rules(rules)

        ignore = False
        category = None
        for entry in compiled:
            if ignore and category is not None:
                break

            rule = entry.rule
            if rule.action == RuleAction.IGNORE:
                if ignore:
                    continue
            elif rule.action == RuleAction.CATEGORIZE:
                if category is not None or not rule.category:
                    continue
            else:
                continue

            if entry.pattern.search(description) is None:
                continue

            if rule.action == RuleAction.IGNORE:
                ignore = True
            else:
                category = rule.category

        return RuleResolution(ignore=ignore, category=category or fallback)
    except Exception:
        logger.exception("Rule evaluation failed for %r; using default category", description)
        return RuleResolution(ignore=False, category=fallback)
