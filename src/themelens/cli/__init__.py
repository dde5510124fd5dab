"""
themelens CLI.

- theme.py: Theme inspection commands (show, resolve, complete, flatten, hover, discover)
- lsp.py: Language server commands
"""

from __future__ import annotations

import logging
import platform
import sys

import typer

from themelens import __version__
from themelens.cli.lsp import lsp_app
from themelens.cli.theme import (
    complete_command,
    discover_command,
    flatten_command,
    hover_command,
    resolve_command,
    show_command,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"themelens version {__version__}")
        typer.echo(f"  Python:    {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:  {platform.system()} {platform.release()}")
        raise typer.Exit()


app = typer.Typer(
    help="""themelens: static theme path resolution

Reads the theme object a JS/TS project defines without running it.

  • Inspection: show, resolve, complete, flatten, hover, discover
  • Editor integration: lsp run
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """themelens CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="show")(show_command)
app.command(name="resolve")(resolve_command)
app.command(name="complete")(complete_command)
app.command(name="flatten")(flatten_command)
app.command(name="hover")(hover_command)
app.command(name="discover")(discover_command)

app.add_typer(lsp_app, name="lsp")


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = ["__version__", "app", "main", "version_callback"]

if __name__ == "__main__":
    main(sys.argv[1:])
