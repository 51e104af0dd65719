"""Rendering of version formats against a context map."""

import re
from typing import Mapping

from .exceptions import MissingPlaceholderError

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")


def render(template: str, context: Mapping[str, str]) -> str:
    """
    Replace every ``${key}`` in *template* with ``context[key]``.

    Substitution is a single pass, values are inserted literally and never
    expanded again.

    Raises:
        MissingPlaceholderError: If the template references an unknown key.
    """
    if not template or "${" not in template:
        return template

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        try:
            return str(context[key])
        except KeyError:
            raise MissingPlaceholderError(key, template, context.keys())

    return _PLACEHOLDER_RE.sub(_replace, template)


def escape_version(version: str) -> str:
    """Replace characters ref names allow but versions do not."""
    return version.replace("/", "-")


def render_version(template: str, context: Mapping[str, str]) -> str:
    """Render a version format and escape the result."""
    return escape_version(render(template, context))
