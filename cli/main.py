"""CLI entrypoint."""

import sys

import click
from loguru import logger

from .commands.bundle import bundle


@click.group()
@click.version_option(version="1.0.0", prog_name="dtsbundle")
@click.option("--verbose", "-v", is_flag=True, help="Log every bundling decision")
def cli(verbose: bool):
    """dtsbundle - bundle TypeScript declaration files into a single module file."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


cli.add_command(bundle)


if __name__ == "__main__":
    cli()
