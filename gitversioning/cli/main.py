"""gitversioning CLI"""

import click

from gitversioning import __version__
from gitversioning.cli.facts import facts
from gitversioning.cli.resolve import resolve

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="gitversion")
@click.pass_context
def cli(ctx):
    """
    Derive project versions from git branches, tags and commits.
    """
    ctx.ensure_object(dict)


# Add subcommands to the CLI
cli.add_command(add_debug_option(resolve))
cli.add_command(add_debug_option(facts))

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
