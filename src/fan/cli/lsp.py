"""
LSP (Language Server Protocol) CLI commands.

Commands for running the fan LSP server and reporting its library versions.
"""

from pathlib import Path
from typing import Optional

import typer

from fan.core.config import load_config
from fan.core.errors import ConfigError

from fan.cli.utils import lsp_versions

lsp_app = typer.Typer(
    help="Language Server Protocol (LSP) commands.",
    no_args_is_help=True,
)


@lsp_app.command("run")
def lsp_run(
    tcp: bool = typer.Option(
        False,
        "--tcp",
        help="Use TCP transport (for debugging) instead of stdio",
    ),
    port: int = typer.Option(
        2087,
        "--port",
        help="TCP port (only used with --tcp)",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (overrides fan.toml and FAN_LOG_LEVEL)",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to a fan.toml file",
    ),
) -> None:
    """
    Start the fan LSP server.

    By default uses stdio transport for editor integration.
    Use --tcp --port for debugging with a TCP connection.
    """
    try:
        config = load_config(
            config_path, overrides={"log_level": log_level} if log_level else None
        )
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    from fan.lsp.server import start_server

    if tcp:
        typer.echo(f"Starting fan LSP server on TCP port {port}...", err=True)

    try:
        start_server(config, tcp=tcp, port=port)
    except KeyboardInterrupt:
        typer.echo("\nLSP server stopped.", err=True)


@lsp_app.command("check")
def lsp_check() -> None:
    """
    Show the versions of the LSP libraries the server runs on.
    """
    for name, version in lsp_versions().items():
        typer.echo(f"{name + ':':<14}{version}")
