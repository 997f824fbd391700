"""Output formatters for normalization results."""

import csv
import json
from io import StringIO
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from sqlnorm.normalization.models import (
    NormalizedStatementModel,
    QueryNormalizationResult,
)


def _join_or_dash(items: Sequence[str]) -> str:
    return ", ".join(items) if items else "-"


def _set_field_items(model: NormalizedStatementModel) -> List[str]:
    return [f"{name}={value.render()}" for name, value in model.set_fields.items()]


def _order_by_items(model: NormalizedStatementModel) -> List[str]:
    return [
        f"{name} {'ASC' if ascending else 'DESC'}"
        for name, ascending in model.order_by_fields.items()
    ]


class NormalizationTextFormatter:
    """Format normalization results as Rich tables for terminal display."""

    @staticmethod
    def format(results: List[QueryNormalizationResult], console: Console) -> None:
        """
        Format and print normalization results as Rich tables.

        Args:
            results: List of QueryNormalizationResult objects
            console: Rich Console instance for output
        """
        if not results:
            console.print("[yellow]No normalization results found.[/yellow]")
            return

        for i, result in enumerate(results):
            if i > 0:
                console.print()

            model = result.model
            title = (
                f"Query {result.metadata.query_index} "
                f"({result.metadata.statement_type}): "
                f"{result.metadata.query_preview}"
            )
            table = Table(title=title, title_style="bold")
            table.add_column("Section", style="cyan", width=14)
            table.add_column("Value", style="green", min_width=20)

            table.add_row(
                "Tables",
                _join_or_dash([ref.render() for ref in model.table_infos]),
            )
            table.add_row("Select Fields", _join_or_dash(model.select_fields))
            table.add_row("Set Fields", _join_or_dash(_set_field_items(model)))
            table.add_row("Order By", _join_or_dash(_order_by_items(model)))
            table.add_row("Limit", "-" if model.limit is None else str(model.limit))
            table.add_row("Offset", "-" if model.offset is None else str(model.offset))
            table.add_row("Where", "Yes" if model.where_exist else "No")

            console.print(table)


class NormalizationLineFormatter:
    """Format normalization results as one deterministic line per statement."""

    @staticmethod
    def format(results: List[QueryNormalizationResult]) -> str:
        """
        Format normalization results as summary lines.

        Output format:
        [0] SELECT: table_infos: [table1: DB1.TB1 AS t1], select_fields: [ID], ...

        Args:
            results: List of QueryNormalizationResult objects

        Returns:
            Newline-separated summary lines
        """
        return "\n".join(
            f"[{result.metadata.query_index}] {result.metadata.statement_type}: "
            f"{result.model.render()}"
            for result in results
        )


class NormalizationJsonFormatter:
    """Format normalization results as JSON."""

    @staticmethod
    def format(results: List[QueryNormalizationResult]) -> str:
        """
        Format normalization results as JSON.

        Output format:
        {
          "queries": [
            {
              "query_index": 0,
              "query_preview": "UPDATE TB1 SET ...",
              "statement_type": "UPDATE",
              "table_infos": [
                {"position": 1, "schema_name": null, "table": "TB1", "alias": null}
              ],
              "select_fields": [],
              "set_fields": {"NAME": {"kind": "text", "value": "name1"}},
              "order_by_fields": {},
              "limit": null,
              "offset": null,
              "where_exist": true,
              "original_sql": "UPDATE TB1 SET ..."
            }
          ]
        }

        Args:
            results: List of QueryNormalizationResult objects

        Returns:
            JSON-formatted string
        """
        queries = []
        for result in results:
            model_data = result.model.model_dump(mode="json", exclude={"statement_kind"})
            query_data = {
                "query_index": result.metadata.query_index,
                "query_preview": result.metadata.query_preview,
                "statement_type": result.metadata.statement_type,
                **model_data,
                "original_sql": result.original_sql,
            }
            queries.append(query_data)

        return json.dumps({"queries": queries}, indent=2)


class NormalizationCsvFormatter:
    """Format normalization results as CSV."""

    @staticmethod
    def format(results: List[QueryNormalizationResult]) -> str:
        """
        Format normalization results as CSV.

        Output format:
        query_index,statement_type,tables,select_fields,set_fields,order_by_fields,limit,offset,where_exist
        0,SELECT,DB1.TB1;TB2,ID;NAME,,AGE DESC,10,2,true

        Multi-valued columns are joined with semicolons.

        Args:
            results: List of QueryNormalizationResult objects

        Returns:
            CSV-formatted string
        """
        if not results:
            return ""

        output = StringIO()
        headers = [
            "query_index",
            "statement_type",
            "tables",
            "select_fields",
            "set_fields",
            "order_by_fields",
            "limit",
            "offset",
            "where_exist",
        ]

        writer = csv.writer(output)
        writer.writerow(headers)

        for result in results:
            model = result.model
            writer.writerow(
                [
                    result.metadata.query_index,
                    result.metadata.statement_type,
                    ";".join(model.table_names()),
                    ";".join(model.select_fields),
                    ";".join(_set_field_items(model)),
                    ";".join(_order_by_items(model)),
                    "" if model.limit is None else model.limit,
                    "" if model.offset is None else model.offset,
                    "true" if model.where_exist else "false",
                ]
            )

        return output.getvalue()


class TablesTextFormatter:
    """Format table references as a Rich table."""

    @staticmethod
    def format(results: List[QueryNormalizationResult], console: Console) -> None:
        """
        Print one row per table reference.

        Args:
            results: List of QueryNormalizationResult objects
            console: Rich Console instance for output
        """
        rows = [
            (result, reference)
            for result in results
            for reference in result.model.table_infos
        ]
        if not rows:
            console.print("[yellow]No tables found.[/yellow]")
            return

        table = Table(title="Tables", title_style="bold")
        table.add_column("Query", style="dim", width=6)
        table.add_column("Statement", style="cyan", width=13)
        table.add_column("Position", style="yellow", width=8)
        table.add_column("Schema", style="blue")
        table.add_column("Table", style="green")
        table.add_column("Alias", style="magenta")

        for result, reference in rows:
            table.add_row(
                str(result.metadata.query_index),
                result.metadata.statement_type,
                str(reference.position),
                reference.schema_name or "-",
                reference.table,
                reference.alias or "-",
            )

        console.print(table)


class TablesJsonFormatter:
    """Format table references as JSON."""

    @staticmethod
    def format(results: List[QueryNormalizationResult]) -> str:
        """
        Format table references as JSON.

        Output format:
        {
          "queries": [
            {
              "query_index": 0,
              "statement_type": "SELECT",
              "tables": [
                {"position": 1, "schema_name": "DB1", "table": "TB1", "alias": "t1"}
              ]
            }
          ]
        }

        Args:
            results: List of QueryNormalizationResult objects

        Returns:
            JSON-formatted string
        """
        queries = [
            {
                "query_index": result.metadata.query_index,
                "statement_type": result.metadata.statement_type,
                "tables": [
                    reference.model_dump(mode="json")
                    for reference in result.model.table_infos
                ],
            }
            for result in results
        ]
        return json.dumps({"queries": queries}, indent=2)


class TablesCsvFormatter:
    """Format table references as CSV."""

    @staticmethod
    def format(results: List[QueryNormalizationResult]) -> str:
        """
        Format table references as CSV.

        Output format:
        query_index,statement_type,position,schema,table,alias
        0,SELECT,1,DB1,TB1,t1

        Args:
            results: List of QueryNormalizationResult objects

        Returns:
            CSV-formatted string
        """
        if not results:
            return ""

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            ["query_index", "statement_type", "position", "schema", "table", "alias"]
        )

        for result in results:
            for reference in result.model.table_infos:
                writer.writerow(
                    [
                        result.metadata.query_index,
                        result.metadata.statement_type,
                        reference.position,
                        reference.schema_name or "",
                        reference.table,
                        reference.alias or "",
                    ]
                )

        return output.getvalue()


class OutputWriter:
    """Write formatted output to file or stdout."""

    @staticmethod
    def write(content: str, output_file: Optional[Path] = None) -> None:
        """
        Write content to file or stdout.

        Args:
            content: The content to write
            output_file: Optional file path. If None, writes to stdout.
        """
        if output_file:
            output_file.write_text(content, encoding="utf-8")
        else:
            print(content)
