"""
Document inspection commands: parse checks and outlines.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fan.core.errors import ParseError
from fan.core.ir import GrammarDocument
from fan.core.loader import parse_document
from fan.core.outline import OutlineEntry
from fan.core.store import LinkDiagnostic
from fan.core.workspace import Workspace

console = Console()


class _DiscardingSink:
    """Diagnostics sink for one-shot CLI runs."""

    def publish(self, uri: str, version: int | None, diagnostics: list[LinkDiagnostic]) -> None:
        pass


def check(
    files: list[Path] = typer.Argument(..., help="Grammar or action files to check"),
) -> None:
    """
    Parse documents and report what each one declares.

    Exits with status 1 if any file is unreadable or fails to parse.
    """
    table = Table(title="fan documents")
    table.add_column("File")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Defs", justify="right")
    table.add_column("Status")

    failed = False
    for path in files:
        try:
            text = path.read_text(encoding="utf-8")
            model = parse_document(text, str(path))
        except OSError as e:
            table.add_row(str(path), "-", "-", "-", f"[red]{e.strerror or e}[/red]")
            failed = True
            continue
        except ParseError as e:
            table.add_row(str(path), "grammar", "-", "-", f"[red]{escape(e.message)}[/red]")
            if e.context:
                console.print(f"[red]{escape(str(e))}[/red]")
            failed = True
            continue

        if model is None:
            table.add_row(str(path), "-", "-", "-", "[yellow]no unit declaration[/yellow]")
            continue

        count = len(model.rules) if isinstance(model, GrammarDocument) else len(model.methods)
        table.add_row(str(path), model.kind.value, model.name, str(count), "[green]ok[/green]")

    console.print(table)
    if failed:
        raise typer.Exit(code=1)


def outline(
    grammar: Path = typer.Argument(..., help="Grammar file"),
    actions: Optional[Path] = typer.Option(
        None,
        "--actions",
        "-a",
        help="Action file to link against the grammar",
    ),
    format: str = typer.Option("tree", "--format", "-f", help="Output format: 'tree' or 'json'"),
) -> None:
    """
    Print the outline of a document, annotated with its action links.
    """
    workspace = Workspace(_DiscardingSink())

    paths = [grammar] + ([actions] if actions else [])
    for path in paths:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            typer.echo(f"Error: cannot read {path}: {e.strerror or e}", err=True)
            raise typer.Exit(code=1)
        workspace.open_document(str(path), text)

    entries = workspace.get_outline(str(grammar))
    if entries is None:
        typer.echo(f"Error: {grammar} has no parsable unit declaration", err=True)
        raise typer.Exit(code=1)

    if format == "json":
        import json

        typer.echo(json.dumps([entry.model_dump(mode="json") for entry in entries], indent=2))
        return

    for entry in entries:
        _echo_entry(entry)


def _echo_entry(entry: OutlineEntry, depth: int = 0) -> None:
    indent = "   " * depth
    bullet = "📦" if depth == 0 else "•"
    detail = f" ({entry.detail})" if entry.detail else ""
    typer.echo(f"{indent}{bullet} {entry.label}{detail}")
    for child in entry.children:
        _echo_entry(child, depth + 1)
