"""
Context map construction.

The context map holds every value a version format can reference. It is built
in a fixed order and later writes overwrite earlier ones, so values computed
from the repository always win over static configuration properties.
"""

import logging
import re
from typing import Callable, Dict, Optional

from gitversioning.model import (
    DescribeFacts,
    ProjectIdentifier,
    RepositoryFacts,
    VersioningConfiguration,
)

from .rules import RefMatch, strip_prefix
from .version import VersionComponents, parse_version_components

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX_RE = re.compile(r"-SNAPSHOT$")

DescribeLookup = Callable[[str], Optional[str]]


def parse_describe(text: Optional[str]) -> Optional[DescribeFacts]:
    """
    Parse ``<ancestor>-<count>-g<abbrev>`` into its distance and commit.

    The ancestor name may itself contain dashes, so only the last two atoms
    are considered. Returns None for missing or malformed input.
    """
    if not text:
        return None
    atoms = text.strip().split("-")
    if len(atoms) < 3:
        return None
    count, commit = atoms[-2], atoms[-1]
    if not count.isdigit():
        return None
    if commit.startswith("g"):
        commit = commit[1:]
    return DescribeFacts(ancestor_distance=int(count), abbreviated_commit=commit)


def add_version_components(
    context: Dict[str, str], key: str, components: VersionComponents
) -> None:
    """Expand parsed components into ``<key>.majorVersion`` and friends."""
    context[f"{key}.majorVersion"] = str(components.major)
    context[f"{key}.minorVersion"] = str(components.minor)
    context[f"{key}.incrementalVersion"] = str(components.incremental)
    context[f"{key}.buildNumber"] = str(components.build_number)
    context[f"{key}.qualifier"] = components.qualifier
    context[f"{key}.nextMajorVersion"] = str(components.next_major)
    context[f"{key}.nextMinorVersion"] = str(components.next_minor)
    context[f"{key}.nextIncrementalVersion"] = str(components.next_incremental)
    context[f"{key}.nextBuildNumber"] = str(components.next_build_number)


def group_values(match: Optional["re.Match[str]"]) -> Dict[str, str]:
    """
    Capture groups of a match, keyed by name and by position.

    Groups that did not take part in the match are left out.
    """
    values: Dict[str, str] = {}
    if match is None:
        return values
    for index, value in enumerate(match.groups(), start=1):
        if value is not None:
            values[str(index)] = value
    for name, value in match.groupdict().items():
        if value is not None:
            values[name] = value
    return values


def base_version(context: Dict[str, str], key: str) -> str:
    return ".".join(
        context[f"{key}.{part}"]
        for part in ("majorVersion", "minorVersion", "incrementalVersion")
    )


def build_context(
    identifier: ProjectIdentifier,
    facts: RepositoryFacts,
    ref_match: RefMatch,
    configuration: VersioningConfiguration,
    describe: Optional[DescribeLookup] = None,
) -> Dict[str, str]:
    """
    Assemble the placeholder values for one resolution.

    Args:
        identifier: Project being versioned, must carry a version
        facts: Repository facts (after provided overrides)
        ref_match: The selected rule and ref
        configuration: Versioning configuration (tag rules, static properties)
        describe: Lookup returning a describe string relative to a base
            version, or None when unavailable

    Returns:
        Fresh context map
    """
    version = identifier.version or ""
    context: Dict[str, str] = {
        "version": version,
        "version.release": SNAPSHOT_SUFFIX_RE.sub("", version),
    }

    context.update(configuration.properties)

    context["commit"] = facts.commit
    context["commit.short"] = facts.commit[:7]

    context[ref_match.ref_type.value] = ref_match.stripped_name
    context.update(group_values(ref_match.rule.fullmatch(ref_match.ref_name)))

    base = None
    if facts.last_tag:
        context["lastTag"] = facts.last_tag
        for rule in configuration.tag:
            if rule.fullmatch(facts.last_tag):
                base = "lastTag"
                add_version_components(
                    context,
                    "lastTag",
                    parse_version_components(strip_prefix(facts.last_tag, rule.prefix)),
                )
                last_tag_describe = parse_describe(facts.describe)
                if last_tag_describe is not None:
                    context["lastTag.commitCount"] = str(
                        last_tag_describe.ancestor_distance
                    )
                break

    nominal = parse_version_components(version)
    if nominal.numeric:
        base = "version"
        add_version_components(context, "version", nominal)

    if base is not None and describe is not None:
        base_ref = base_version(context, base)
        base_describe = parse_describe(describe(base_ref))
        if base_describe is not None:
            # always under version., whichever base was used
            context["version.commitCount"] = str(base_describe.ancestor_distance)
            context["version.gcommit"] = "g" + base_describe.abbreviated_commit
        else:
            logger.debug(f"No describe data relative to {base_ref}")

    return context
