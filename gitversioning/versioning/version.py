"""
Version utility module for version string operations.

This module parses free-form version strings (as found in project descriptors
and git tags) into their numeric components, and provides the ordering used to
rank release tags against each other.

Grammar, tolerant of missing trailing segments:

    <major>[.<minor>[.<incremental>]][(.|-)<buildNumber>][-<qualifier>]

Anything that does not fit degrades to all-zero numbers with the whole text as
qualifier, since qualifier-only versions are legitimate input.
"""

import re
from dataclasses import dataclass
from typing import Tuple

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)"
    r"(?:\.(?P<minor>\d+))?"
    r"(?:\.(?P<incremental>\d+))?"
    r"(?:[.-](?P<build>\d+))?"
    r"(?:-(?P<qualifier>.*))?$"
)


@dataclass(frozen=True)
class VersionComponents:
    """
    Numeric components of a version string.

    Attributes:
        major: Major version number
        minor: Minor version number (0 when absent)
        incremental: Incremental (patch) version number (0 when absent)
        build_number: Build number (0 when absent)
        qualifier: Trailing non-numeric text, empty for plain releases
        numeric: False when the text did not parse and was kept as qualifier
    """

    major: int = 0
    minor: int = 0
    incremental: int = 0
    build_number: int = 0
    qualifier: str = ""
    numeric: bool = True

    @property
    def next_major(self) -> int:
        return self.major + 1

    @property
    def next_minor(self) -> int:
        return self.minor + 1

    @property
    def next_incremental(self) -> int:
        return self.incremental + 1

    @property
    def next_build_number(self) -> int:
        return self.build_number + 1

    @property
    def is_release(self) -> bool:
        """True when the version carries no qualifier."""
        return not self.qualifier

    @property
    def base(self) -> str:
        """The ``major.minor.incremental`` triple."""
        return f"{self.major}.{self.minor}.{self.incremental}"

    @property
    def sort_key(self) -> Tuple[int, int, int, int, int, str]:
        """
        Total order used to rank versions.

        Numbers compare first, then a release sorts above any qualified
        version with the same numbers, then qualifiers compare by ASCII order.
        """
        return (
            self.major,
            self.minor,
            self.incremental,
            self.build_number,
            1 if self.is_release else 0,
            self.qualifier,
        )

    def __lt__(self, other) -> bool:
        if not isinstance(other, VersionComponents):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __le__(self, other) -> bool:
        if not isinstance(other, VersionComponents):
            return NotImplemented
        return self.sort_key <= other.sort_key

    def __gt__(self, other) -> bool:
        if not isinstance(other, VersionComponents):
            return NotImplemented
        return self.sort_key > other.sort_key

    def __ge__(self, other) -> bool:
        if not isinstance(other, VersionComponents):
            return NotImplemented
        return self.sort_key >= other.sort_key

    def __str__(self) -> str:
        if not self.numeric:
            return self.qualifier
        text = self.base
        if self.build_number:
            text += f".{self.build_number}"
        if self.qualifier:
            text += f"-{self.qualifier}"
        return text


def parse_version_components(text: str) -> VersionComponents:
    """
    Parse a version string into its components.

    Never raises: input that does not follow the grammar is returned as a
    qualifier-only version with all numbers set to zero.

    Args:
        text: Version string, e.g. "1.2.3", "2.5.1-rc.1" or "1.0-SNAPSHOT"

    Returns:
        VersionComponents instance
    """
    text = "" if text is None else str(text).strip()
    match = _VERSION_RE.match(text)
    if match is None:
        return VersionComponents(qualifier=text, numeric=False)

    def _int(name: str) -> int:
        value = match.group(name)
        return int(value) if value is not None else 0

    return VersionComponents(
        major=_int("major"),
        minor=_int("minor"),
        incremental=_int("incremental"),
        build_number=_int("build"),
        qualifier=match.group("qualifier") or "",
    )
