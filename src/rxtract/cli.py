"""rxtract CLI entry point.

Commands:
    rxtract parse   <config> <file>...          Extract records as JSON lines or a table
    rxtract check   <config>                    Validate a parser definition
    rxtract convert <value> --type T [--from/--to]  Run a single value conversion
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import settings
from .convert.engine import convert as convert_value
from .errors import ConfigError, ConversionError
from .parsers.base import Record
from .parsers.extractor import Parser

console = Console()
err_console = Console(stderr=True)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _load_parser(config: Path) -> Parser:
    """Build the parser or exit with status 1 and the reason."""
    try:
        return Parser.from_file(config)
    except ConfigError as exc:
        err_console.print(f"[red]Invalid parser config {config}:[/red] {escape(str(exc))}")
        sys.exit(1)


def _iter_records(
    parser: Parser,
    files: tuple[Path, ...],
    workers: int,
    limit: int,
) -> Iterator[tuple[str, Record]]:
    """Yield (source name, record) pairs for every input, honouring limit."""
    count = 0

    if workers != 1 and len(files) > 1 and Path("-") not in files:
        from .perf.parallel_parser import parse_files_parallel

        n = workers if workers > 0 else None
        results = parse_files_parallel(parser.config, [str(f) for f in files], workers=n, limit=limit)
        for result in results:
            for record in result.records:
                if limit and count >= limit:
                    return
                yield result.path, record
                count += 1
        return

    for path in files:
        if str(path) == "-":
            source, name = sys.stdin, "<stdin>"
        else:
            source, name = path.open(encoding="utf-8", errors="replace"), str(path)
        try:
            with parser.parse(source) as stream:
                for record in stream:
                    if limit and count >= limit:
                        return
                    yield name, record
                    count += 1
        finally:
            if source is not sys.stdin:
                source.close()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="0.1.0", prog_name="rxtract")
@click.option(
    "--log-level", default=settings.log_level, show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Diagnostics written to stderr.",
)
def main(log_level: str) -> None:
    """rxtract: regex-driven extraction of flat JSON records from text."""
    _setup_logging(log_level)


# ── parse ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument(
    "files", nargs=-1, required=True,
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "--output", "-o", "output_fmt", default=settings.default_output,
    type=click.Choice(["json", "table"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max records to output (0 = all).")
@click.option("--errors/--no-errors", "show_errors", default=True, help="Report record errors on stderr.")
@click.option("--workers", "-w", default=1, type=int, help="Parallel workers for multiple files (0 = auto).")
def parse(
    config: Path,
    files: tuple[Path, ...],
    output_fmt: str,
    limit: int,
    show_errors: bool,
    workers: int,
) -> None:
    """Extract records from FILES using the parser defined in CONFIG.

    Use - as a file name to read standard input.

    \b
    Examples:
      rxtract parse iostat.json iostat.log
      rxtract parse vmstat.json a.log b.log --workers 0
      dmesg | rxtract parse kernel.json - --output table
    """
    parser = _load_parser(config)
    records = _iter_records(parser, files, workers, limit)

    if output_fmt == "table":
        from .visualization.tables import print_records_table

        collected = [record for _, record in records]
        print_records_table(collected, title=config.stem, max_rows=limit or 100)
        return

    count = errors = 0
    for name, record in records:
        if record.data is not None:
            click.echo(record.data.decode("utf-8"))
        for exc in record.errors:
            errors += 1
            if show_errors:
                err_console.print(f"[red]{escape(name)}:[/red] {escape(str(exc))}")
        count += 1

    err_console.print(
        f"[dim]Extracted {count} record{'s' if count != 1 else ''}"
        f" with {errors} error{'s' if errors != 1 else ''}[/dim]"
    )


# ── check ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(config: Path) -> None:
    """Validate a parser definition and show its rules.

    \b
    Examples:
      rxtract check iostat.json
    """
    from .visualization.tables import print_rules_table

    parser = _load_parser(config)
    console.print(f"[bold]Parser:[/bold] {config.name}  [bold]Mode:[/bold] {parser.mode}")
    print_rules_table(parser, title=f"{len(parser.rules)} rules", console=console)


# ── convert ──────────────────────────────────────────────────────────────────


@main.command()
@click.argument("value")
@click.option("--type", "-t", "type_", required=True, help="Value type (int, float, duration, ...).")
@click.option("--from", "-f", "from_", default="", help="Source format or unit.")
@click.option("--to", "-T", "to", default="", help="Destination format or unit.")
def convert(value: str, type_: str, from_: str, to: str) -> None:
    """Convert a single VALUE and print the JSON scalar.

    \b
    Examples:
      rxtract convert 132m --type duration --to hours
      rxtract convert 1mib --type datasize --to kib
      rxtract convert 1537335984 --type time --from unix --to rfc3339
    """
    if not value:
        err_console.print("[yellow]Empty value: nothing to convert.[/yellow]")
        sys.exit(1)
    try:
        click.echo(convert_value(value, type_, from_, to).decode("utf-8"))
    except ConversionError as exc:
        err_console.print(f"[red]Conversion failed:[/red] {escape(str(exc))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
