"""Statement dispatch and multi-statement normalization."""

from typing import List, Optional

from sqlglot import exp, parse
from sqlglot.errors import ParseError

from sqlnorm.global_models import StatementKind
from sqlnorm.normalization.errors import UnsupportedStatementError
from sqlnorm.normalization.extractors import (
    extract_create_columns,
    extract_insert_assignments,
    extract_ordering,
    extract_pagination,
    extract_projection,
    extract_update_assignments,
    from_list,
    has_predicate,
    resolve_table_references,
)
from sqlnorm.normalization.models import (
    NormalizedStatementModel,
    QueryMetadata,
    QueryNormalizationResult,
    SkippedStatement,
)

DEFAULT_DIALECT = "mysql"


def classify_statement(expr: exp.Expression) -> Optional[StatementKind]:
    """
    Identify the kind of a parsed statement.

    Args:
        expr: Parsed statement

    Returns:
        The StatementKind, or None if the statement is not supported
    """
    if isinstance(expr, exp.Select):
        return StatementKind.SELECT
    if isinstance(expr, exp.Insert):
        return StatementKind.INSERT
    if isinstance(expr, exp.Update):
        return StatementKind.UPDATE
    if isinstance(expr, exp.Delete):
        return StatementKind.DELETE
    if isinstance(expr, exp.Create) and (expr.args.get("kind") or "").upper() == "TABLE":
        return StatementKind.CREATE_TABLE
    return None


def get_statement_type(expr: exp.Expression) -> str:
    """Get human-readable statement type."""
    kind = classify_statement(expr)
    if kind is not None:
        return kind.value

    if isinstance(expr, exp.Create):
        create_kind = expr.args.get("kind") or ""
        return f"CREATE {create_kind}".strip().upper()

    if isinstance(expr, exp.Command):
        return str(expr.this).upper()

    return type(expr).__name__.upper()


def _normalize_select(select: exp.Select) -> NormalizedStatementModel:
    limit, offset = extract_pagination(select)
    return NormalizedStatementModel(
        statement_kind=StatementKind.SELECT,
        table_infos=resolve_table_references(from_list(select)),
        select_fields=extract_projection(select),
        order_by_fields=extract_ordering(select),
        limit=limit,
        offset=offset,
        where_exist=has_predicate(select),
    )


def _normalize_insert(insert: exp.Insert) -> NormalizedStatementModel:
    return NormalizedStatementModel(
        statement_kind=StatementKind.INSERT,
        table_infos=resolve_table_references([insert.this]),
        set_fields=extract_insert_assignments(insert),
    )


def _normalize_update(update: exp.Update) -> NormalizedStatementModel:
    return NormalizedStatementModel(
        statement_kind=StatementKind.UPDATE,
        table_infos=resolve_table_references([update.this]),
        set_fields=extract_update_assignments(update),
        where_exist=has_predicate(update),
    )


def _normalize_delete(delete: exp.Delete) -> NormalizedStatementModel:
    return NormalizedStatementModel(
        statement_kind=StatementKind.DELETE,
        table_infos=resolve_table_references([delete.this]),
        where_exist=has_predicate(delete),
    )


def _normalize_create_table(create: exp.Create) -> NormalizedStatementModel:
    return NormalizedStatementModel(
        statement_kind=StatementKind.CREATE_TABLE,
        table_infos=resolve_table_references([create.this]),
        set_fields=extract_create_columns(create),
    )


def normalize_statement(expr: exp.Expression) -> NormalizedStatementModel:
    """
    Normalize one parsed statement into a NormalizedStatementModel.

    Args:
        expr: Parsed statement (SELECT, INSERT, UPDATE, DELETE or CREATE TABLE)

    Returns:
        The fully populated model

    Raises:
        UnsupportedStatementError: If the statement kind is not supported
        NumericConversionError: If a numeric literal cannot be converted
    """
    kind = classify_statement(expr)

    if kind == StatementKind.SELECT:
        return _normalize_select(expr)
    elif kind == StatementKind.INSERT:
        return _normalize_insert(expr)
    elif kind == StatementKind.UPDATE:
        return _normalize_update(expr)
    elif kind == StatementKind.DELETE:
        return _normalize_delete(expr)
    elif kind == StatementKind.CREATE_TABLE:
        return _normalize_create_table(expr)

    raise UnsupportedStatementError(get_statement_type(expr))


class StatementNormalizer:
    """Normalize every statement of a SQL string."""

    def __init__(self, sql: str, dialect: str = DEFAULT_DIALECT):
        """
        Initialize the statement normalizer.

        Args:
            sql: SQL string (can contain multiple statements)
            dialect: SQL dialect (default: mysql)

        Raises:
            ParseError: If the SQL cannot be parsed
        """
        self.sql = sql
        self.dialect = dialect
        self._skipped_statements: List[SkippedStatement] = []

        try:
            parsed = parse(sql, dialect=dialect)

            # Empty statements and bare comments parse to None
            self.expressions: List[exp.Expression] = [
                expr for expr in parsed if expr is not None
            ]

            if not self.expressions:
                raise ParseError("No valid SQL statements found")

        except ParseError as e:
            raise ParseError(f"Invalid SQL syntax: {e}") from e

    @property
    def skipped_statements(self) -> List[SkippedStatement]:
        """Get list of statements that were skipped during normalization."""
        return self._skipped_statements.copy()

    def normalize_queries(
        self,
        statement_filter: Optional[StatementKind] = None,
        table_filter: Optional[str] = None,
    ) -> List[QueryNormalizationResult]:
        """
        Normalize all statements.

        Unsupported statement kinds are recorded in ``skipped_statements``
        instead of failing the call. Numeric conversion failures are not
        caught and fail the whole call.

        Args:
            statement_filter: Only return statements of this kind
            table_filter: Only return statements that reference this table
                (case-insensitive, bare or schema-qualified)

        Returns:
            List of QueryNormalizationResult objects in statement order

        Raises:
            NumericConversionError: If a numeric literal cannot be converted
        """
        self._skipped_statements = []
        results: List[QueryNormalizationResult] = []

        for query_index, expr in enumerate(self.expressions):
            preview = self._generate_query_preview(expr)

            try:
                model = normalize_statement(expr)
            except UnsupportedStatementError as e:
                self._skipped_statements.append(
                    SkippedStatement(
                        query_index=query_index,
                        statement_type=e.statement_type,
                        reason=str(e),
                        query_preview=preview,
                    )
                )
                continue

            if statement_filter is not None and model.statement_kind != statement_filter:
                continue
            if table_filter and not model.references_table(table_filter):
                continue

            results.append(
                QueryNormalizationResult(
                    metadata=QueryMetadata(
                        query_index=query_index,
                        query_preview=preview,
                        statement_type=model.statement_kind.value,
                    ),
                    model=model,
                    original_sql=expr.sql(dialect=self.dialect),
                )
            )

        return results

    def _generate_query_preview(self, expr: exp.Expression) -> str:
        """Generate preview string (first 100 chars)."""
        query_text = " ".join(expr.sql(dialect=self.dialect).split())
        preview = query_text[:100]
        if len(query_text) > 100:
            preview += "..."
        return preview


def normalize_sql(sql: str, dialect: str = DEFAULT_DIALECT) -> NormalizedStatementModel:
    """
    Parse and normalize a single SQL statement.

    Args:
        sql: SQL text containing exactly one statement
        dialect: SQL dialect (default: mysql)

    Returns:
        The NormalizedStatementModel for the statement

    Raises:
        ParseError: If the SQL cannot be parsed
        ValueError: If the text holds more than one statement
        UnsupportedStatementError: If the statement kind is not supported
        NumericConversionError: If a numeric literal cannot be converted
    """
    normalizer = StatementNormalizer(sql, dialect=dialect)
    if len(normalizer.expressions) > 1:
        raise ValueError(
            f"Expected a single SQL statement, found {len(normalizer.expressions)}"
        )
    return normalize_statement(normalizer.expressions[0])
