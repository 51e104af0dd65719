"""cli command resolving the git-based version of a project"""

import json
import sys

import click

from gitversioning.config import load_configuration
from gitversioning.model import ProjectIdentifier
from gitversioning.versioning import (
    MissingVersionError,
    VersioningError,
    VersionResolver,
)

from gitversioning.cli.utils.logging import logger


@click.command("resolve")
@click.argument("coordinates", required=False)
@click.option("--group", "-g", default=None, help="Group of the project.")
@click.option("--artifact", "-a", default=None, help="Artifact name of the project.")
@click.option(
    "--version",
    "-v",
    "nominal_version",
    default=None,
    help="Nominal version declared by the project, e.g. 1.2.0-SNAPSHOT.",
)
@click.option(
    "--repo",
    "-r",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Path inside the project's git repository.",
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
@click.option(
    "--json",
    "return_json",
    is_flag=True,
    default=False,
    help="Print the full resolution result as JSON.",
)
@click.option(
    "--properties",
    "show_properties",
    is_flag=True,
    default=False,
    help="Also print the project properties a build would export.",
)
@click.pass_context
def resolve(
    ctx,
    coordinates,
    group,
    artifact,
    nominal_version,
    repo: str,
    config_file,
    return_json: bool,
    show_properties: bool,
):
    """
    Resolve the version of a project from its git repository.

    The project is given either as COORDINATES (group:artifact:version) or
    with --group, --artifact and --version.
    """
    identifier = _identifier(coordinates, group, artifact, nominal_version)

    try:
        configuration = load_configuration(config_file, start=repo)
    except VersioningError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    if configuration.disabled:
        logger.info("git versioning disabled")
        click.echo(identifier.version or "")
        return

    resolver = VersionResolver(configuration)
    try:
        resolved = resolver.resolve(identifier, repo)
    except MissingVersionError as e:
        logger.error(f"Error: {e}. Pass a non-empty version.")
        sys.exit(1)
    except VersioningError as e:
        logger.debug("Resolution failed", exc_info=True)
        logger.error(f"Error: {e}")
        sys.exit(1)

    properties = resolved.export_properties(configuration.include_properties)

    if return_json:
        data = resolved.to_dict()
        if show_properties:
            data["properties"] = properties
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(resolved.version)
    if show_properties:
        for key, value in sorted(properties.items()):
            click.echo(f"{key}={value}")


def _identifier(coordinates, group, artifact, nominal_version) -> ProjectIdentifier:
    if coordinates:
        if group or artifact or nominal_version is not None:
            raise click.UsageError(
                "COORDINATES cannot be combined with --group, --artifact or --version"
            )
        try:
            return ProjectIdentifier.parse(coordinates)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="COORDINATES")

    if not group or not artifact or nominal_version is None:
        raise click.UsageError(
            "Pass group:artifact:version or all of --group, --artifact and --version"
        )
    return ProjectIdentifier(group=group, artifact=artifact, version=nominal_version)
