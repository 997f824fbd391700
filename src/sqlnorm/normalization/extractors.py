"""Clause extractors that pull structural facts out of sqlglot statements.

Every extractor reads one clause of an already-parsed statement. Shapes an
extractor does not recognize (subqueries, qualified columns, computed
expressions, placeholders) are left out of the result rather than treated
as errors. The only failures are numeric literals that cannot be
represented, which raise NumericConversionError.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from sqlglot import exp

from sqlnorm.normalization.errors import NumericConversionError
from sqlnorm.normalization.literals import normalize_literal, parse_unsigned_integer
from sqlnorm.normalization.models import LiteralValue, TableReference, UnsetValue


def resolve_table_reference(
    node: Optional[exp.Expression], position: int
) -> Optional[TableReference]:
    """
    Build a TableReference from a table node.

    Args:
        node: A Table, or a Schema wrapping one (INSERT column lists,
            CREATE TABLE definitions)
        position: 1-based position to assign

    Returns:
        TableReference, or None for anything that is not a plain one- or
        two-part table name
    """
    if isinstance(node, exp.Schema):
        node = node.this

    if not isinstance(node, exp.Table) or not isinstance(node.this, exp.Identifier):
        return None

    # Three-part names are not part of the supported grammar
    if node.catalog:
        return None

    return TableReference(
        position=position,
        schema_name=node.db or None,
        table=node.name,
        alias=node.alias or None,
    )


def resolve_table_references(
    nodes: Iterable[Optional[exp.Expression]],
) -> List[TableReference]:
    """
    Resolve table nodes in clause order, numbering the resolvable ones 1..K.

    Args:
        nodes: Table nodes in the order they appear in the clause

    Returns:
        List of TableReference objects with contiguous positions
    """
    references: List[TableReference] = []
    for node in nodes:
        reference = resolve_table_reference(node, len(references) + 1)
        if reference is not None:
            references.append(reference)
    return references


def _is_comma_join(join: exp.Join) -> bool:
    """Check if a join is a comma-separated FROM item rather than a JOIN."""
    if join.args.get("on") is not None or join.args.get("using"):
        return False
    return not (join.text("kind") or join.text("side") or join.text("method"))


def from_list(select: exp.Select) -> List[exp.Expression]:
    """
    Get the FROM items of a SELECT: the first item plus comma-separated ones.

    Explicit JOINs are not part of the list.
    """
    items: List[exp.Expression] = []

    from_clause = next(
        (child for child in select.iter_expressions() if isinstance(child, exp.From)),
        None,
    )
    if from_clause is not None and from_clause.this is not None:
        items.append(from_clause.this)

    for join in select.args.get("joins") or []:
        if _is_comma_join(join):
            items.append(join.this)

    return items


def _bare_column_name(node: Optional[exp.Expression]) -> Optional[str]:
    """Return the column name for an unqualified column reference."""
    if not isinstance(node, exp.Column) or not isinstance(node.this, exp.Identifier):
        return None
    if node.table:
        return None
    return node.name


def extract_projection(select: exp.Select) -> List[str]:
    """
    Extract bare projected column names in source order.

    ``SELECT ID, NAME AS n, t.AGE, COUNT(*), *`` yields ``["ID", "NAME"]``.

    Args:
        select: SELECT expression

    Returns:
        List of column names
    """
    fields: List[str] = []
    for projection in select.expressions:
        target = projection.this if isinstance(projection, exp.Alias) else projection
        name = _bare_column_name(target)
        if name is not None:
            fields.append(name)
    return fields


def extract_insert_assignments(insert: exp.Insert) -> Dict[str, LiteralValue]:
    """
    Pair the INSERT column list with the first VALUES row by position.

    Columns whose value is not a recognized literal are left out. INSERT
    without a column list, or with a SELECT source, yields no entries.

    Args:
        insert: INSERT expression

    Returns:
        Ordered mapping of column name to value

    Raises:
        NumericConversionError: If a number literal cannot be converted
    """
    target = insert.this
    if not isinstance(target, exp.Schema):
        return {}

    columns = [column.name for column in target.expressions]

    source = insert.expression
    if not isinstance(source, exp.Values) or not source.expressions:
        return {}

    first_row = source.expressions[0]
    values = first_row.expressions if isinstance(first_row, exp.Tuple) else [first_row]

    assignments: Dict[str, LiteralValue] = {}
    for column, value_node in zip(columns, values):
        value = normalize_literal(value_node, context=f"INSERT column {column}")
        if value is not None:
            assignments[column] = value
    return assignments


def extract_update_assignments(update: exp.Update) -> Dict[str, LiteralValue]:
    """
    Extract ``SET column = literal`` pairs from an UPDATE.

    Args:
        update: UPDATE expression

    Returns:
        Ordered mapping of column name to value (last assignment wins)

    Raises:
        NumericConversionError: If a number literal cannot be converted
    """
    assignments: Dict[str, LiteralValue] = {}
    for assignment in update.expressions:
        if not isinstance(assignment, exp.EQ):
            continue

        target = assignment.this
        if not isinstance(target, (exp.Column, exp.Identifier)):
            continue

        name = target.name
        value = normalize_literal(assignment.expression, context=f"SET {name}")
        if value is not None:
            assignments[name] = value
    return assignments


def extract_create_columns(create: exp.Create) -> Dict[str, LiteralValue]:
    """Map each column defined by CREATE TABLE to UnsetValue."""
    schema = create.this
    if not isinstance(schema, exp.Schema):
        return {}

    return {
        column.name: UnsetValue()
        for column in schema.expressions
        if isinstance(column, exp.ColumnDef)
    }


def has_predicate(statement: exp.Expression) -> bool:
    """Check whether the statement has a WHERE clause."""
    return statement.args.get("where") is not None


def extract_ordering(select: exp.Select) -> Dict[str, bool]:
    """
    Extract ORDER BY column directions.

    Explicit ASC maps to True and explicit DESC to False. Without an explicit
    direction the column is recorded as descending (False).

    Args:
        select: SELECT expression

    Returns:
        Ordered mapping of column name to ascending flag (last mention wins)
    """
    order = select.args.get("order")
    if order is None:
        return {}

    fields: Dict[str, bool] = {}
    for ordered in order.expressions:
        if not isinstance(ordered, exp.Ordered):
            continue

        name = _bare_column_name(ordered.this)
        if name is None:
            continue

        # desc is True for DESC, False for an explicit ASC, None when omitted
        fields[name] = ordered.args.get("desc") is False
    return fields


def _pagination_bound(node: Optional[exp.Expression], clause: str) -> Optional[int]:
    """Read an unsigned LIMIT or OFFSET literal; other expressions give None."""
    if isinstance(node, exp.Neg) and isinstance(node.this, exp.Literal):
        if not node.this.is_string:
            raise NumericConversionError(f"-{node.this.this}", clause)

    if isinstance(node, exp.Literal) and not node.is_string:
        return parse_unsigned_integer(node.this, clause)

    return None


def extract_pagination(select: exp.Select) -> Tuple[Optional[int], Optional[int]]:
    """
    Extract LIMIT and OFFSET bounds.

    Handles both ``LIMIT n OFFSET m`` and MySQL's ``LIMIT m, n``. Only
    integer literals count; placeholders and computed values leave the
    bound absent.

    Args:
        select: SELECT expression

    Returns:
        Tuple of (limit, offset)

    Raises:
        NumericConversionError: If a bound is a malformed, negative or
            out-of-range number literal
    """
    limit_value: Optional[int] = None
    offset_value: Optional[int] = None

    limit = select.args.get("limit")
    if isinstance(limit, exp.Limit):
        limit_value = _pagination_bound(limit.expression, "LIMIT")
        inline_offset = limit.args.get("offset")
        if inline_offset is not None:
            offset_value = _pagination_bound(inline_offset, "OFFSET")

    offset = select.args.get("offset")
    if isinstance(offset, exp.Offset):
        offset_value = _pagination_bound(offset.expression, "OFFSET")

    return limit_value, offset_value
