"""Locate and load the versioning configuration of a project"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from gitversioning.model import VersioningConfiguration

APP_NAME = "gitversioning"

CONFIG_FILE_NAMES = (f".{APP_NAME}.yaml", f".{APP_NAME}.yml")

# Environment variables overriding repository facts, e.g. on CI runners that
# check out a detached HEAD but know the branch being built.
ENV_PROVIDED_COMMIT = "VERSIONING_GIT_COMMIT"
ENV_PROVIDED_BRANCH = "VERSIONING_GIT_BRANCH"
ENV_PROVIDED_TAG = "VERSIONING_GIT_TAG"
ENV_DISABLE = "VERSIONING_DISABLE"

_TRUE_VALUES = {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


def find_config_file(start: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Find the nearest configuration file, walking up from *start*.

    Args:
        start: Directory to start from (defaults to the current directory)

    Returns:
        Path to the configuration file, or None if there is none
    """
    directory = Path(start or Path.cwd()).resolve()
    if directory.is_file():
        directory = directory.parent

    for candidate_dir in (directory, *directory.parents):
        for name in CONFIG_FILE_NAMES:
            candidate = candidate_dir / name
            if candidate.is_file():
                return candidate
    return None


def apply_environment(
    configuration: VersioningConfiguration,
    environ: Optional[Mapping[str, str]] = None,
) -> VersioningConfiguration:
    """
    Overlay ``VERSIONING_*`` environment variables onto a configuration.

    A variable that is set, even to an empty string, takes precedence over
    the configuration file. An empty branch or tag means "none", an empty
    commit clears the override so the repository HEAD is used.
    """
    if environ is None:
        environ = os.environ

    updates: Dict[str, object] = {}
    if ENV_PROVIDED_COMMIT in environ:
        updates["provided_commit"] = environ[ENV_PROVIDED_COMMIT] or None
    if ENV_PROVIDED_BRANCH in environ:
        updates["provided_branch"] = environ[ENV_PROVIDED_BRANCH]
    if ENV_PROVIDED_TAG in environ:
        updates["provided_tag"] = environ[ENV_PROVIDED_TAG]
    if ENV_DISABLE in environ:
        updates["disabled"] = environ[ENV_DISABLE].strip().lower() in _TRUE_VALUES

    if not updates:
        return configuration

    logger.debug(f"Configuration overrides from environment: {sorted(updates)}")
    return configuration.model_copy(update=updates)


def load_configuration(
    path: Optional[Union[str, Path]] = None,
    start: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> VersioningConfiguration:
    """
    Load the versioning configuration.

    Args:
        path: Explicit configuration file; if None, search upwards from *start*
        start: Directory to search from (defaults to the current directory)
        environ: Environment to read overrides from (defaults to os.environ)

    Returns:
        The configuration, the default one when no file is found

    Raises:
        ConfigurationError: If the file is unreadable or invalid
    """
    if path is None:
        path = find_config_file(start)

    if path is None:
        logger.debug("No versioning configuration found, using defaults")
        configuration = VersioningConfiguration()
    else:
        logger.debug(f"Loading versioning configuration from {path}")
        configuration = VersioningConfiguration.from_yaml(Path(path))

    return apply_environment(configuration, environ)
