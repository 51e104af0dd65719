"""
Rule matching: decide which formatting rule applies to the repository state.

Rules are ordered, first match wins. Branch rules are tried against the
current branch, then tag rules against the tags at HEAD, and the commit rule
is the catch-all.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from gitversioning.model import (
    RefType,
    RepositoryFacts,
    VersionFormatRule,
    VersioningConfiguration,
)

from .version import parse_version_components

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefMatch:
    """
    The rule selected for the current repository state.

    Attributes:
        rule: The matching rule
        ref_type: Kind of ref the rule matched
        ref_name: Full, un-stripped ref name (the commit hash for commit rules)
    """

    rule: VersionFormatRule
    ref_type: RefType
    ref_name: str

    @property
    def stripped_name(self) -> str:
        return strip_prefix(self.ref_name, self.rule.prefix)


def strip_prefix(text: str, prefix: str) -> str:
    """Remove a literal leading prefix, leaving the text unchanged otherwise."""
    if prefix and text.startswith(prefix):
        return text[len(prefix) :]
    return text


def match_branch(
    branch: str, rules: List[VersionFormatRule]
) -> Optional[VersionFormatRule]:
    """
    Return the first rule whose pattern matches the whole branch name.

    Args:
        branch: Branch name, e.g. "release/2.1"
        rules: Branch rules in priority order

    Returns:
        The first matching rule, or None
    """
    for rule in rules:
        if rule.fullmatch(branch):
            return rule
    return None


def match_tag(
    tags: Iterable[str], rules: List[VersionFormatRule]
) -> Optional[Tuple[VersionFormatRule, str]]:
    """
    Pick a rule and the highest-versioned tag it matches.

    Rules are tried in order. For each rule the matching tags are ranked by
    the version parsed from the prefix-stripped tag name, and the first rule
    matching any tag wins even if a later rule would match more tags.

    Args:
        tags: Tag names pointing at HEAD
        rules: Tag rules in priority order

    Returns:
        (rule, tag) or None when no rule matches any tag
    """
    # sorted input keeps ties between equal versions deterministic
    candidates = sorted(tags)
    for rule in rules:
        matching = [tag for tag in candidates if rule.fullmatch(tag)]
        if not matching:
            continue
        best = max(
            matching,
            key=lambda tag: parse_version_components(
                strip_prefix(tag, rule.prefix)
            ).sort_key,
        )
        if len(matching) > 1:
            logger.debug(f"Tags {matching} match '{rule.pattern}', picked {best}")
        return rule, best
    return None


def match_ref(facts: RepositoryFacts, configuration: VersioningConfiguration) -> RefMatch:
    """
    Select the rule for the given repository facts.

    Branch rules apply when HEAD is on a branch, then tag rules, and the commit
    rule with the full commit hash as ref name when nothing else matched.
    """
    if facts.branch:
        rule = match_branch(facts.branch, configuration.branch)
        if rule is not None:
            return RefMatch(rule=rule, ref_type=RefType.branch, ref_name=facts.branch)

    if facts.tags:
        tag_match = match_tag(facts.tags, configuration.tag)
        if tag_match is not None:
            rule, tag = tag_match
            return RefMatch(rule=rule, ref_type=RefType.tag, ref_name=tag)

    return RefMatch(
        rule=configuration.commit, ref_type=RefType.commit, ref_name=facts.commit
    )
