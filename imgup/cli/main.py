"""Main CLI entry point for imgup."""

from __future__ import annotations

import click

from imgup import __version__
from imgup.cli.config_cmd import config
from imgup.cli.upload import upload


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="imgup")
def cli() -> None:
    """imgup - Compress and upload batches of images.

    Every image is compressed and uploaded on its own task, with live
    per-file and overall progress.

    Get started:

      imgup config init          # Create config file

      imgup upload photos/       # Upload every PNG/JPG in a directory

    Use --help on any command for more information.
    """
    pass


# =============================================================================
# Register Commands
# =============================================================================

cli.add_command(config)
cli.add_command(upload)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
