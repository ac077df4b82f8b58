"""Rich-powered table rendering for extracted records and parser rules."""
from __future__ import annotations

from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..parsers.base import Record

if TYPE_CHECKING:
    from ..parsers.extractor import Parser

_console = Console()


def print_records_table(
    records: list[Record],
    title: str = "Records",
    max_rows: int = 100,
    console: Console | None = None,
) -> None:
    """Render records as a Rich table.

    Columns are the union of field names in first-seen order, plus an
    ``errors`` column when any record carries errors.

    Args:
        records:   Records to show.
        title:     Table title shown in the header.
        max_rows:  Hard cap; longer lists are truncated with a notice.
        console:   Target console (default: stdout).
    """
    out = console or _console
    if not records:
        out.print("[yellow]No records to display.[/yellow]")
        return

    shown = records[:max_rows]
    rows = [r.as_dict() for r in shown]
    cols: list[str] = []
    for row in rows:
        cols.extend(k for k in row if k not in cols)
    with_errors = any(r.errors for r in shown)

    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    for col in cols:
        table.add_column(col, overflow="fold", max_width=60)
    if with_errors:
        table.add_column("errors", style="red", overflow="fold", max_width=80)

    for record, row in zip(shown, rows):
        cells = ["" if row.get(c) is None else escape(str(row[c])) for c in cols]
        if with_errors:
            cells.append(escape("; ".join(str(e) for e in record.errors)))
        table.add_row(*cells)

    out.print(table)
    if len(records) > max_rows:
        out.print(
            f"[dim]... and {len(records) - max_rows} more rows (use --limit to adjust)[/dim]"
        )


def print_rules_table(parser: "Parser", title: str = "Rules", console: Console | None = None) -> None:
    """Render a parser's rules (name, type, from, to, regex) as a Rich table."""
    out = console or _console
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Regex", overflow="fold")

    for rank, rule in enumerate(parser.rules, start=1):
        cfg = rule.config
        table.add_row(str(rank), cfg.name, rule.type.value, escape(cfg.from_), escape(cfg.to), escape(cfg.regex))

    out.print(table)
