"""
Theme inspection CLI commands.

Commands for looking at the theme a project defines:
- show: Summary and leaf table
- resolve: Value at a property path
- complete: Children of a path
- flatten: Dotted-key listing
- hover: What an editor hover would show at a file position
- discover: Locate the theme through ThemeProvider usage
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from themelens.core.api import resolve_path, suggest_children
from themelens.core.document import ThemeDocument
from themelens.core.errors import ThemeLensError
from themelens.core.queries import hover_at
from themelens.core.values import flatten_paths, preview, to_plain, type_name
from themelens.workspace import ThemeWorkspace

console = Console()

ROOT_OPTION = typer.Option(Path("."), "--root", "-r", help="Project root directory")
FILE_OPTION = typer.Option(
    None, "--file", "-f", help="Theme source file (overrides configuration and discovery)"
)


def parse_path(text: str) -> list[str]:
    """``theme.palette.primary`` or ``palette.primary`` to a property path."""
    segments = [segment for segment in text.strip().split(".") if segment]
    if segments and segments[0] == "theme":
        segments = segments[1:]
    return segments


def _open_workspace(root: Path, theme_file: Path | None) -> ThemeWorkspace:
    try:
        workspace = ThemeWorkspace(root)
        if theme_file is not None:
            workspace.theme_path = theme_file.resolve()
        workspace.load()
    except ThemeLensError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    return workspace


def _load_document(root: Path, theme_file: Path | None) -> ThemeDocument:
    workspace = _open_workspace(root, theme_file)
    document = workspace.document
    if document is None:
        if workspace.theme_path is None:
            console.print("[yellow]No theme file configured or discovered[/yellow]")
        else:
            console.print(f"[yellow]No theme object found in {workspace.theme_path}[/yellow]")
        raise typer.Exit(1)
    return document


def show_command(
    root: Path = ROOT_OPTION,
    theme_file: Path | None = FILE_OPTION,
) -> None:
    """Show the extracted theme."""
    document = _load_document(root, theme_file)

    console.print(f"Theme: [cyan]{document.source_path or '<memory>'}[/cyan]")
    for imported in document.imported_paths:
        console.print(f"  via [dim]{imported}[/dim]")
    console.print(f"Fingerprint: [dim]{document.fingerprint[:16]}[/dim]")
    console.print()

    table = Table(title="Theme values")
    table.add_column("Path", style="cyan")
    table.add_column("Type")
    table.add_column("Value")
    for path, value in flatten_paths(document.root):
        table.add_row(".".join(path), type_name(value), preview(value))
    console.print(table)


def resolve_command(
    path: str = typer.Argument(..., help="Property path, e.g. palette.primary.main"),
    root: Path = ROOT_OPTION,
    theme_file: Path | None = FILE_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the value as JSON"),
) -> None:
    """Resolve a property path against the theme."""
    document = _load_document(root, theme_file)
    segments = parse_path(path)
    value = resolve_path(document, segments)
    if value is None:
        console.print(f"[red]Not found:[/red] theme.{'.'.join(segments)}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(to_plain(value), indent=2))
    else:
        typer.echo(preview(value, limit=1000))


def complete_command(
    path: str = typer.Argument("", help="Parent property path (empty for the theme root)"),
    prefix: str = typer.Option("", "--prefix", "-p", help="Only children starting with this"),
    root: Path = ROOT_OPTION,
    theme_file: Path | None = FILE_OPTION,
) -> None:
    """List the children of a property path."""
    document = _load_document(root, theme_file)
    segments = parse_path(path)
    if prefix:
        segments = segments + [prefix]
    suggestions = suggest_children(document, segments, partial=bool(prefix))
    if not suggestions:
        console.print("[yellow]No suggestions[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"theme.{'.'.join(parse_path(path))}" if path else "theme")
    table.add_column("Name", style="cyan")
    table.add_column("Preview")
    for suggestion in suggestions:
        table.add_row(suggestion.name, suggestion.preview)
    console.print(table)


def flatten_command(
    root: Path = ROOT_OPTION,
    theme_file: Path | None = FILE_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print a JSON object"),
) -> None:
    """Print every leaf as a dotted key."""
    document = _load_document(root, theme_file)
    leaves = flatten_paths(document.root)
    if as_json:
        typer.echo(json.dumps({".".join(p): to_plain(v) for p, v in leaves if p}, indent=2))
        return
    for path, value in leaves:
        if path:
            typer.echo(f"{'.'.join(path)} = {preview(value)}")


def hover_command(
    file: Path = typer.Argument(..., help="Source file", exists=True, dir_okay=False),
    line: int = typer.Argument(..., help="Line (1-based)", min=1),
    column: int = typer.Argument(..., help="Column (1-based)", min=1),
    root: Path = ROOT_OPTION,
    theme_file: Path | None = FILE_OPTION,
) -> None:
    """Show the theme value at a position in a source file."""
    workspace = _open_workspace(root, theme_file)
    document = workspace.document
    if document is None:
        console.print("[yellow]No theme loaded[/yellow]")
        raise typer.Exit(1)

    try:
        source = workspace.read_source(file)
    except ThemeLensError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    offset = source.offset_at(line - 1, column - 1)
    result = hover_at(document, source, offset, workspace.options)
    if result is None:
        console.print("[yellow]No theme access at this position[/yellow]")
        raise typer.Exit(1)

    console.print(f"[cyan]theme.{'.'.join(result.path)}[/cyan]")
    console.print(f"  value:   {preview(result.value, limit=1000)}")
    console.print(f"  type:    {type_name(result.value)}")
    console.print(f"  context: {result.context.structural_context}")


def discover_command(root: Path = ROOT_OPTION) -> None:
    """Find the theme through <ThemeProvider theme={...}> usage."""
    try:
        discovered = ThemeWorkspace(root).discover()
    except ThemeLensError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if discovered is None:
        console.print("[yellow]No ThemeProvider with a traceable theme found[/yellow]")
        raise typer.Exit(1)
    console.print(f"Theme file:    [cyan]{discovered.path}[/cyan]")
    console.print(f"Provider file: {discovered.provider_file}")
