"""cli command showing the repository facts versions are derived from"""

import json
import sys

import click

from gitversioning.config import load_configuration
from gitversioning.versioning import VersioningError, VersionResolver

from gitversioning.cli.utils.logging import logger


@click.command("facts")
@click.option(
    "--repo",
    "-r",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Path inside the git repository.",
    envvar="VERSIONING_REPO",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Versioning configuration file (defaults to the nearest .gitversioning.yaml).",
)
@click.pass_context
def facts(ctx, repo: str, config_file):
    """Show commit, branch and tags as seen by version resolution."""
    try:
        configuration = load_configuration(config_file, start=repo)
        resolver = VersionResolver(configuration)
        repository_facts = resolver.repository_facts(repo)
    except VersioningError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    click.echo(json.dumps(repository_facts.to_dict(), indent=2))
