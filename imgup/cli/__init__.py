"""CLI modules for imgup."""

from imgup.cli.main import cli, main

__all__ = ["cli", "main"]
