"""
fan CLI Package.

- inspect.py: check and outline commands for documents on disk
- lsp.py: LSP server commands
- utils.py: Shared utilities
"""

import typer

from fan import __version__
from fan.cli.inspect import check, outline
from fan.cli.lsp import lsp_app
from fan.cli.utils import version_callback

app = typer.Typer(
    help="""fan-ls – language intelligence for fan grammar and action documents

  • Documents on disk: check, outline
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
) -> None:
    """fan-ls main callback for global options."""
    pass


app.command(name="check")(check)
app.command(name="outline")(outline)
app.add_typer(lsp_app, name="lsp")


def main() -> None:
    app(standalone_mode=True)


__all__ = ["__version__", "app", "main", "lsp_app"]
