"""Pydantic models for the versioning configuration."""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

# Java-style named groups, (?<name>...), as written in existing rule sets.
# Lookbehinds (?<= and (?<! are left untouched.
_JAVA_NAMED_GROUP_RE = re.compile(r"\(\?<([A-Za-z_][A-Za-z0-9_]*)>")


def translate_pattern(pattern: str) -> str:
    """Rewrite ``(?<name>...)`` groups into Python's ``(?P<name>...)`` syntax."""
    return _JAVA_NAMED_GROUP_RE.sub(r"(?P<\1>", pattern)


class VersionFormatRule(BaseModel):
    """
    A single formatting rule: which refs it applies to and how to render them.

    The commit rule is the catch-all and carries no pattern.
    """

    model_config = ConfigDict(frozen=True)

    pattern: Optional[str] = Field(
        None, description="Regular expression the full ref name must match"
    )
    prefix: str = Field("", description="Literal prefix stripped from the ref name")
    format: str = Field(..., description="Version template, e.g. '${branch}-SNAPSHOT'")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = translate_pattern(v)
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regular expression '{v}': {e}")
        return v

    @field_validator("prefix", mode="before")
    @classmethod
    def validate_prefix(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def regex(self) -> "re.Pattern[str]":
        if self.pattern is None:
            raise ValueError("rule has no pattern")
        return re.compile(self.pattern)

    def fullmatch(self, name: str) -> Optional["re.Match[str]"]:
        """Anchored match of the whole ref name, None for the pattern-less rule."""
        if self.pattern is None:
            return None
        return self.regex.fullmatch(name)


def _default_commit_rule() -> VersionFormatRule:
    return VersionFormatRule(format="${commit}")


class VersioningConfiguration(BaseModel):
    """
    Rule lists and settings driving version resolution.

    Rules are tried in list order, first match wins: branch rules, then tag
    rules, then the commit rule.
    """

    disabled: bool = Field(False, description="Skip resolution entirely")
    branch: List[VersionFormatRule] = Field(
        default_factory=list, description="Ordered branch rules"
    )
    tag: List[VersionFormatRule] = Field(
        default_factory=list, description="Ordered tag rules"
    )
    commit: VersionFormatRule = Field(
        default_factory=_default_commit_rule, description="Catch-all commit rule"
    )
    include_properties: bool = Field(
        False, description="Export the whole context map as project properties"
    )
    properties: Dict[str, str] = Field(
        default_factory=dict, description="Static values merged into the context"
    )
    provided_commit: Optional[str] = Field(
        None, description="Commit hash overriding the repository HEAD"
    )
    provided_branch: Optional[str] = Field(
        None, description="Branch overriding the repository branch, '' for none"
    )
    provided_tag: Optional[str] = Field(
        None, description="Tag overriding the tags at HEAD, '' for none"
    )

    @field_validator("properties", mode="before")
    @classmethod
    def stringify_properties(cls, v: Any) -> Dict[str, str]:
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("properties must be a mapping")
        return {str(key): "" if value is None else str(value) for key, value in v.items()}

    @field_validator("branch", "tag", mode="before")
    @classmethod
    def empty_rule_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @model_validator(mode="after")
    def validate_rule_patterns(self) -> "VersioningConfiguration":
        for kind, rules in (("branch", self.branch), ("tag", self.tag)):
            for index, rule in enumerate(rules):
                if rule.pattern is None:
                    raise ValueError(f"{kind} rule #{index + 1} has no pattern")
        return self

    @classmethod
    def from_yaml(
        cls, path_or_content: Union[str, Path]
    ) -> "VersioningConfiguration":
        """Load a configuration from a YAML file or string content."""
        # Import here to avoid circular dependency
        from gitversioning.versioning.exceptions import ConfigurationError

        source = None
        try:
            if isinstance(path_or_content, Path) or "\n" not in str(path_or_content):
                # Treat as file path
                source = str(path_or_content)
                with open(path_or_content, "r") as f:
                    data = yaml.safe_load(f)
            else:
                # Treat as YAML content string
                data = yaml.safe_load(str(path_or_content))
        except OSError as e:
            raise ConfigurationError(f"cannot read file: {e}", source)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"malformed YAML: {e}", source)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("top level must be a mapping", source)

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e), source)
