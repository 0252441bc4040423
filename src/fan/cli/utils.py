"""
fan CLI utilities.

Shared helpers used across CLI modules.
"""

import platform
from importlib.metadata import version
from pathlib import Path

import typer

from fan import __version__

LSP_DISTRIBUTIONS = ("pygls", "lsprotocol")


def lsp_versions() -> dict[str, str]:
    """Installed versions of the libraries the language server is built on."""
    return {name: version(name) for name in LSP_DISTRIBUTIONS}


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        python_version = platform.python_version()
        python_impl = platform.python_implementation()

        import fan

        install_location = Path(fan.__file__).parent
        lsp_libraries = ", ".join(f"{name} {v}" for name, v in lsp_versions().items())

        typer.echo(f"fan-ls version {__version__}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {python_impl} {python_version}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        typer.echo(f"  Location:      {install_location}")
        typer.echo(f"  LSP Server:    {lsp_libraries}")

        raise typer.Exit()
