"""
LSP (Language Server Protocol) CLI commands.

Commands for running the themelens LSP server.
"""

import typer

lsp_app = typer.Typer(
    help="Language Server Protocol (LSP) commands.",
    no_args_is_help=True,
)


@lsp_app.command("run")
def lsp_run(
    tcp: bool = typer.Option(
        False,
        "--tcp",
        help="Use TCP transport (for debugging)",
    ),
    port: int = typer.Option(
        2087,
        "--port",
        help="TCP port (only used with --tcp)",
    ),
) -> None:
    """
    Start the themelens LSP server.

    By default uses stdio transport for editor integration.
    Use --tcp --port for debugging with a TCP connection.
    """
    from themelens.lsp.server import server, start_server

    if tcp:
        typer.echo(f"Starting themelens LSP server on TCP port {port}...")
        server.start_tcp("127.0.0.1", port)
        return
    try:
        start_server()
    except KeyboardInterrupt:
        typer.echo("\nLSP server stopped.")


@lsp_app.command("check")
def lsp_check() -> None:
    """
    Show versions of the LSP and parser dependencies.
    """
    from importlib.metadata import PackageNotFoundError, version

    missing = []
    for package in ("pygls", "lsprotocol", "tree-sitter", "tree-sitter-typescript"):
        try:
            typer.echo(f"{package + ':':<24}{version(package)}")
        except PackageNotFoundError:
            missing.append(package)

    if missing:
        typer.echo(f"\nMissing dependencies: {', '.join(missing)}", err=True)
        raise typer.Exit(code=1)

    typer.echo("\nAll LSP dependencies installed.")
