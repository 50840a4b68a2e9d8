"""Rich table builders used by the CLI."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from autoargs.cli.main import SuggestionEntry


def build_suggestions_table(entries: Iterable[SuggestionEntry]) -> Table:
    """Build the (#, Title, Group) table for `autoargs suggest`."""
    table = Table(show_header=True, title="Suggestions")
    table.add_column("#", style="cyan")
    table.add_column("Title")
    table.add_column("Group")
    for entry in entries:
        table.add_row(str(entry.index), entry.title, entry.group or "")
    return table
