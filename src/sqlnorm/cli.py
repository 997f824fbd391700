"""CLI entry point for sqlnorm."""

from io import StringIO
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from sqlglot.errors import ParseError

from sqlnorm.global_models import OutputFormat, StatementKind
from sqlnorm.normalization.analyzer import DEFAULT_DIALECT, StatementNormalizer
from sqlnorm.normalization.errors import NormalizationError
from sqlnorm.normalization.formatters import (
    NormalizationCsvFormatter,
    NormalizationJsonFormatter,
    NormalizationLineFormatter,
    NormalizationTextFormatter,
    OutputWriter,
    TablesCsvFormatter,
    TablesJsonFormatter,
    TablesTextFormatter,
)
from sqlnorm.normalization.models import QueryNormalizationResult
from sqlnorm.utils.config import ConfigSettings, load_config
from sqlnorm.utils.file_utils import read_sql_source

app = typer.Typer(
    name="sqlnorm",
    help="Summarize SQL statements: tables, fields, values, ordering and paging.",
    invoke_without_command=False,
)
console = Console()
err_console = Console(stderr=True)


def _resolve_statement_kind(
    statement_type: Optional[str], config: ConfigSettings
) -> Optional[StatementKind]:
    """Resolve the statement filter from the CLI option or config.

    Raises:
        typer.Exit: If the CLI value is not a supported statement kind.
    """
    if not statement_type:
        return config.statement_type

    normalized = statement_type.upper().replace("_", " ")
    try:
        return StatementKind(normalized)
    except ValueError:
        valid = ", ".join(kind.value for kind in StatementKind)
        err_console.print(
            f"[red]Error:[/red] Invalid statement type '{statement_type}'. "
            f"Use one of: {valid}."
        )
        raise typer.Exit(1)


def _normalize_file(
    sql_file: Path,
    dialect: str,
    statement_kind: Optional[StatementKind] = None,
    table_filter: Optional[str] = None,
) -> List[QueryNormalizationResult]:
    """Read, parse and normalize a SQL file, warning about skipped statements."""
    sql = read_sql_source(sql_file)
    normalizer = StatementNormalizer(sql, dialect=dialect)
    results = normalizer.normalize_queries(
        statement_filter=statement_kind, table_filter=table_filter
    )

    for skipped in normalizer.skipped_statements:
        err_console.print(
            f"[yellow]Warning:[/yellow] Skipping query {skipped.query_index} "
            f"({skipped.statement_type}): {escape(skipped.reason)}"
        )

    return results


def _write_text(
    render: Callable[[Console], None], output_file: Optional[Path], label: str
) -> None:
    """Render Rich output to the terminal, or as plain text into a file."""
    if output_file:
        string_buffer = StringIO()
        render(Console(file=string_buffer, force_terminal=False))
        output_file.write_text(string_buffer.getvalue(), encoding="utf-8")
        console.print(f"[green]Success:[/green] {label} written to {output_file}")
    else:
        render(console)


def _write_formatted(content: str, output_file: Optional[Path], label: str) -> None:
    OutputWriter.write(content, output_file)
    if output_file:
        console.print(f"[green]Success:[/green] {label} written to {output_file}")


def _handle_error(e: Exception) -> None:
    """Print an error for a failed command and exit with status 1."""
    if isinstance(e, ParseError):
        err_console.print(f"[red]Error:[/red] Failed to parse SQL: {escape(str(e))}")
    elif isinstance(e, (FileNotFoundError, NormalizationError, ValueError)):
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
    else:
        err_console.print(f"[red]Error:[/red] Unexpected error: {escape(str(e))}")
    raise typer.Exit(1)


@app.callback()
def main():
    """sqlnorm - SQL statement normalizer."""
    pass


@app.command()
def normalize(
    sql_file: Path = typer.Argument(
        ...,
        help="Path to SQL file to normalize ('-' reads stdin)",
    ),
    dialect: Optional[str] = typer.Option(
        None,
        "--dialect",
        "-d",
        help="SQL dialect (default: mysql, or from config)",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output-format",
        "-f",
        help="Output format: 'text', 'json', 'csv' or 'line' (default: text, or from config)",
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output-file",
        "-o",
        help="Write output to file instead of stdout",
    ),
    statement_type: Optional[str] = typer.Option(
        None,
        "--statement-type",
        "-s",
        help="Only show statements of this kind (SELECT, INSERT, UPDATE, DELETE, CREATE TABLE)",
    ),
    table_filter: Optional[str] = typer.Option(
        None,
        "--table",
        help="Only show statements that reference this table",
    ),
) -> None:
    """
    Normalize every statement of a SQL file into a structural summary.

    Configuration can be set in sqlnorm.toml in the current directory.
    CLI arguments override configuration file values.

    Examples:

        # Summarize all statements
        sqlnorm normalize queries.sql

        # One deterministic line per statement
        sqlnorm normalize queries.sql --output-format line

        # Only UPDATE statements touching the orders table, as JSON
        sqlnorm normalize queries.sql -s update --table orders -f json

        # Read from stdin
        cat queries.sql | sqlnorm normalize -
    """
    config = load_config()

    dialect = dialect or config.dialect or DEFAULT_DIALECT
    output_format = output_format or (
        config.output_format.value if config.output_format else "text"
    )
    statement_kind = _resolve_statement_kind(statement_type, config)

    if output_format not in [fmt.value for fmt in OutputFormat]:
        err_console.print(
            f"[red]Error:[/red] Invalid output format '{output_format}'. "
            "Use 'text', 'json', 'csv', or 'line'."
        )
        raise typer.Exit(1)

    try:
        results = _normalize_file(
            sql_file,
            dialect=dialect,
            statement_kind=statement_kind,
            table_filter=table_filter,
        )

        if output_format == OutputFormat.TEXT.value:
            _write_text(
                lambda target: NormalizationTextFormatter.format(results, target),
                output_file,
                "Normalization",
            )
        elif output_format == OutputFormat.JSON.value:
            _write_formatted(
                NormalizationJsonFormatter.format(results), output_file, "Normalization"
            )
        elif output_format == OutputFormat.CSV.value:
            _write_formatted(
                NormalizationCsvFormatter.format(results), output_file, "Normalization"
            )
        else:
            _write_formatted(
                NormalizationLineFormatter.format(results), output_file, "Normalization"
            )

    except Exception as e:
        _handle_error(e)


@app.command()
def tables(
    sql_file: Path = typer.Argument(
        ...,
        help="Path to SQL file to analyze ('-' reads stdin)",
    ),
    dialect: Optional[str] = typer.Option(
        None,
        "--dialect",
        "-d",
        help="SQL dialect (default: mysql, or from config)",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output-format",
        "-f",
        help="Output format: 'text', 'json', or 'csv' (default: text, or from config)",
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output-file",
        "-o",
        help="Write output to file instead of stdout",
    ),
) -> None:
    """
    List the tables each statement of a SQL file refers to.

    Examples:

        # List tables per statement
        sqlnorm tables queries.sql

        # Export to CSV file
        sqlnorm tables queries.sql --output-format csv --output-file tables.csv
    """
    config = load_config()

    dialect = dialect or config.dialect or DEFAULT_DIALECT
    output_format = output_format or (
        config.output_format.value if config.output_format else "text"
    )

    if output_format not in ["text", "json", "csv"]:
        err_console.print(
            f"[red]Error:[/red] Invalid output format '{output_format}'. "
            "Use 'text', 'json', or 'csv'."
        )
        raise typer.Exit(1)

    try:
        results = _normalize_file(sql_file, dialect=dialect)

        if output_format == "text":
            _write_text(
                lambda target: TablesTextFormatter.format(results, target),
                output_file,
                "Tables",
            )
        elif output_format == "json":
            _write_formatted(TablesJsonFormatter.format(results), output_file, "Tables")
        else:
            _write_formatted(TablesCsvFormatter.format(results), output_file, "Tables")

    except Exception as e:
        _handle_error(e)


if __name__ == "__main__":
    app()
