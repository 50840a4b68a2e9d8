"""AutoArgs CLI - placeholder arguments for NSubstitute calls.

This module provides a command-line host for the refactoring: list the
suggestions offered at a position in a C# file, and apply one of them.
"""

from __future__ import annotations

import asyncio
import json
import logging
import traceback
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from autoargs.core.errors import AutoArgsError
from autoargs.refactoring.actions import CodeAction, CodeActionGroup
from autoargs.refactoring.provider import AutoArgsRefactoringProvider, Suggestion
from autoargs.syntax.tree import TextSpan
from autoargs.workspace.document import Document
from autoargs.workspace.project import Project

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="autoargs",
    help="Fill empty NSubstitute calls with Arg.Any<T>() placeholders",
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

# Global verbose flag
_verbose: bool = False


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode and route debug logs to stderr."""
    global _verbose
    _verbose = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{traceback.format_exc()}[/dim]")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging and full tracebacks"),
    ] = False,
) -> None:
    """AutoArgs CLI - placeholder arguments for NSubstitute calls."""
    set_verbose(verbose)


@dataclass
class SuggestionEntry:
    """One runnable action, flattened out of its group."""

    index: int
    title: str
    group: str | None = None


def flatten_suggestion(suggestion: Suggestion | None) -> list[tuple[SuggestionEntry, CodeAction]]:
    """Number the actions of a suggestion from 1."""
    if suggestion is None:
        return []
    if isinstance(suggestion, CodeActionGroup):
        return [
            (SuggestionEntry(i, action.title, suggestion.title), action)
            for i, action in enumerate(suggestion.actions, start=1)
        ]
    return [(SuggestionEntry(1, suggestion.title), suggestion)]


def position_to_offset(text: str, line: int, column: int) -> int:
    """Convert a 1-based line and column into a character offset.

    Raises:
        typer.BadParameter: If the position lies outside ``text``.
    """
    lines = text.splitlines(keepends=True) or [""]
    if line < 1 or line > len(lines):
        raise typer.BadParameter(f"Line {line} is outside the file (1-{len(lines)})")
    content = lines[line - 1].rstrip("\r\n")
    if column < 1 or column > len(content) + 1:
        raise typer.BadParameter(f"Column {column} is outside line {line} (1-{len(content) + 1})")
    return sum(len(l) for l in lines[:line - 1]) + column - 1


def load_document(
    file: Path, project_dir: Optional[Path], references: list[str]
) -> Document:
    """Open ``file`` inside its project, or as a one-file project."""
    if project_dir is not None:
        project = Project.from_directory(project_dir, references)
        return project.get_document(str(file))
    text = file.read_text(encoding="utf-8-sig")
    project = Project.from_sources({str(file): text}, references, name=file.stem)
    return project.get_document(str(file))


async def _compute(document: Document, offset: int) -> Suggestion | None:
    provider = AutoArgsRefactoringProvider()
    return await provider.compute_suggestion(document, TextSpan(offset, 0))


FileArgument = Annotated[
    Path,
    typer.Argument(
        help="C# source file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
LineOption = Annotated[int, typer.Option("--line", "-l", help="1-based line of the caret")]
ColumnOption = Annotated[int, typer.Option("--column", "-c", help="1-based column of the caret")]
ProjectOption = Annotated[
    Optional[Path],
    typer.Option(
        "--project",
        "-p",
        help="Project directory (all *.cs files and *.csproj references)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
]
ReferenceOption = Annotated[
    Optional[list[str]],
    typer.Option("--reference", "-r", help="Extra external reference name (repeatable)"),
]


@app.command()
def suggest(
    file: FileArgument,
    line: LineOption,
    column: ColumnOption,
    project: ProjectOption = None,
    reference: ReferenceOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output machine-readable JSON"),
    ] = False,
) -> None:
    """List the suggestions offered at a position.

    Example:
        autoargs suggest Tests/OrderTests.cs --line 12 --column 27 --project .
    """
    try:
        document = load_document(file, project, reference or [])
        offset = position_to_offset(document.text, line, column)
        entries = [entry for entry, _ in flatten_suggestion(asyncio.run(_compute(document, offset)))]
    except AutoArgsError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        print_exception(e)
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps([asdict(e) for e in entries], ensure_ascii=False, indent=2))
        return

    if not entries:
        console.print("[yellow]No suggestions at this position[/yellow]")
        return

    from autoargs.cli._tables import build_suggestions_table

    console.print(build_suggestions_table(entries))


@app.command()
def apply(
    file: FileArgument,
    line: LineOption,
    column: ColumnOption,
    choice: Annotated[
        int,
        typer.Option("--choice", "-n", help="Number of the suggestion to apply", min=1),
    ] = 1,
    project: ProjectOption = None,
    reference: ReferenceOption = None,
    write: Annotated[
        bool,
        typer.Option("--write", "-w", help="Write the result back to FILE instead of printing it"),
    ] = False,
) -> None:
    """Apply one suggestion and print the rewritten file.

    Example:
        autoargs apply Tests/OrderTests.cs --line 12 --column 27 --choice 2 --write
    """
    try:
        document = load_document(file, project, reference or [])
        offset = position_to_offset(document.text, line, column)
        actions = flatten_suggestion(asyncio.run(_compute(document, offset)))
        if not actions:
            err_console.print("[red]Error:[/red] No suggestions at this position")
            raise typer.Exit(1)
        if choice > len(actions):
            err_console.print(
                f"[red]Error:[/red] Invalid choice {choice}; {len(actions)} suggestion(s) available"
            )
            raise typer.Exit(1)
        entry, action = actions[choice - 1]
        changed = asyncio.run(action.get_changed_document())
    except AutoArgsError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        print_exception(e)
        raise typer.Exit(1)

    if write:
        file.write_text(changed.text, encoding="utf-8")
        console.print(f"[green]✓[/green] Applied: {entry.title}")
        console.print(f"  File: {file}")
        return

    typer.echo(changed.text, nl=False)


if __name__ == "__main__":
    app()
