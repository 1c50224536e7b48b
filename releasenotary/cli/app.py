"""Main Typer application.

Entry point: ``releasenotary`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from releasenotary.cli.commands.notarize import console, notarize_cmd
from releasenotary.config import config

app = typer.Typer(
    name="releasenotary",
    help="Notarize GitHub release assets on an immutable ledger.",
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="notarize", help="Notarize and verify all assets of a release.")(notarize_cmd)


def configure_logging(level: str) -> None:
    """Route library logging through Rich on the shared console."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=False)],
        force=True,
    )


def main() -> None:
    """CLI entry point."""
    configure_logging(config.log_level)
    app()


if __name__ == "__main__":
    main()
