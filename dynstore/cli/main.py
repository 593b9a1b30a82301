#!/usr/bin/env python3
"""
dynstore CLI

Main entrypoint for the dynstore command-line tool.
"""

import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from dynstore.cli.commands import replay
from dynstore.logging_config import setup_logging

# Initialize Typer app
app = typer.Typer(
    name="dynstore",
    help="Dynamic store tooling",
    add_completion=False,
)

console = Console()

app.command(name="replay")(replay.replay_command)


@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Overrides DYNSTORE_LOG_LEVEL"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="json or text; overrides DYNSTORE_LOG_FORMAT"),
):
    """Dynamic store tooling."""
    setup_logging(level=log_level, fmt=log_format)


@app.command()
def version():
    """Show version information."""
    from dynstore import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]dynstore[/bold]", f"v{__version__}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
