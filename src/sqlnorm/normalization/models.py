"""Pydantic models for normalized SQL statements."""

from typing import Annotated, Dict, Iterable, List, Literal, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    field_validator,
)

from sqlnorm.global_models import StatementKind

U64_MAX = 2**64 - 1


def _check_u64(value: int) -> int:
    if value > U64_MAX:
        raise ValueError(f"{value} does not fit in an unsigned 64-bit integer")
    return value


class UnsetValue(BaseModel):
    """No value known (a declared column without data)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unset"] = "unset"

    def render(self) -> str:
        return "Unset"


class TextValue(BaseModel):
    """A string literal."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    value: str

    def render(self) -> str:
        return f"Text({self.value!r})"


class UnsignedIntegerValue(BaseModel):
    """An unsigned integer literal within the 64-bit range."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unsigned_integer"] = "unsigned_integer"
    value: StrictInt = Field(..., ge=0)

    @field_validator("value")
    @classmethod
    def _fits_in_64_bits(cls, value: int) -> int:
        return _check_u64(value)

    def render(self) -> str:
        return f"UnsignedInteger({self.value})"


class BooleanValue(BaseModel):
    """A TRUE/FALSE literal."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["boolean"] = "boolean"
    value: StrictBool

    def render(self) -> str:
        return f"Boolean({str(self.value).lower()})"


LiteralValue = Annotated[
    Union[UnsetValue, TextValue, UnsignedIntegerValue, BooleanValue],
    Field(discriminator="kind"),
]


class TableReference(BaseModel):
    """A table named by a statement, in clause order."""

    model_config = ConfigDict(frozen=True)

    position: int = Field(..., ge=1, description="1-based position in the clause")
    schema_name: Optional[str] = Field(
        None, description="Schema (database) qualifier, if the name had one"
    )
    table: str = Field(..., description="Table name")
    alias: Optional[str] = Field(None, description="Table alias, if any")

    @property
    def qualified_name(self) -> str:
        """Return ``schema.table`` or just ``table``."""
        if self.schema_name:
            return f"{self.schema_name}.{self.table}"
        return self.table

    def render(self) -> str:
        rendered = f"table{self.position}: {self.qualified_name}"
        if self.alias:
            rendered += f" AS {self.alias}"
        return rendered


def _bracket(items: Iterable[str]) -> str:
    return "[" + ", ".join(items) + "]"


def _optional(value: Optional[int]) -> str:
    return "none" if value is None else str(value)


class NormalizedStatementModel(BaseModel):
    """Structural summary of one SQL statement.

    Collections keep source order. ``set_fields`` and ``order_by_fields``
    are insertion-ordered; when a key repeats, the later value replaces the
    earlier one and the key keeps its first position.

    Sequences are tuples. The two mappings are plain dicts, so the freeze
    does not reach their entries; treat them as read-only.
    """

    model_config = ConfigDict(frozen=True)

    statement_kind: StatementKind = Field(..., description="Kind of statement")
    table_infos: Tuple[TableReference, ...] = Field(
        default=(), description="Referenced tables in clause order"
    )
    select_fields: Tuple[str, ...] = Field(
        default=(), description="Projected bare column names (SELECT)"
    )
    set_fields: Dict[str, LiteralValue] = Field(
        default_factory=dict,
        description="Field name to literal value (INSERT/UPDATE/CREATE TABLE)",
    )
    order_by_fields: Dict[str, bool] = Field(
        default_factory=dict, description="Field name to ascending flag"
    )
    limit: Optional[int] = Field(None, ge=0, description="LIMIT bound")
    offset: Optional[int] = Field(None, ge=0, description="OFFSET bound")
    where_exist: bool = Field(default=False, description="Whether a WHERE exists")

    @field_validator("limit", "offset")
    @classmethod
    def _bounds_fit_in_64_bits(cls, value: Optional[int]) -> Optional[int]:
        return value if value is None else _check_u64(value)

    @field_validator("table_infos")
    @classmethod
    def _positions_are_contiguous(
        cls, value: Tuple[TableReference, ...]
    ) -> Tuple[TableReference, ...]:
        for expected, reference in enumerate(value, start=1):
            if reference.position != expected:
                raise ValueError(
                    f"table positions must run 1..{len(value)} in order, "
                    f"got {reference.position} at index {expected - 1}"
                )
        return value

    def table_names(self) -> List[str]:
        """Get the qualified names of all referenced tables, in order."""
        return [reference.qualified_name for reference in self.table_infos]

    def references_table(self, name: str) -> bool:
        """Check whether the statement names a table (case-insensitive).

        Args:
            name: Bare (``orders``) or schema-qualified (``shop.orders``) name.

        Returns:
            True if any table reference matches.
        """
        name_lower = name.lower()
        for reference in self.table_infos:
            if name_lower in (
                reference.table.lower(),
                reference.qualified_name.lower(),
            ):
                return True
        return False

    def render(self) -> str:
        """Render the model as one deterministic line."""
        tables = _bracket(reference.render() for reference in self.table_infos)
        select_fields = _bracket(self.select_fields)
        set_fields = _bracket(
            f"{name}={value.render()}" for name, value in self.set_fields.items()
        )
        order_by_fields = _bracket(
            f"{name} {'ASC' if ascending else 'DESC'}"
            for name, ascending in self.order_by_fields.items()
        )
        return (
            f"table_infos: {tables}, "
            f"select_fields: {select_fields}, "
            f"set_fields: {set_fields}, "
            f"order_by_fields: {order_by_fields}, "
            f"limit: {_optional(self.limit)}, "
            f"offset: {_optional(self.offset)}, "
            f"where_exist: {str(self.where_exist).lower()}"
        )

    def __str__(self) -> str:
        return self.render()


class QueryMetadata(BaseModel):
    """Metadata about a normalized statement."""

    query_index: int = Field(..., description="0-based query index in multi-query file")
    query_preview: str = Field(..., description="First 100 chars of original query")
    statement_type: str = Field(
        ..., description="Type of SQL statement (SELECT, INSERT, CREATE TABLE, etc.)"
    )


class QueryNormalizationResult(BaseModel):
    """Normalization result for a single statement."""

    metadata: QueryMetadata
    model: NormalizedStatementModel
    original_sql: str = Field(
        ..., description="Original SQL statement for reference"
    )


class SkippedStatement(BaseModel):
    """A statement that was not normalized because its kind is unsupported."""

    query_index: int = Field(..., description="0-based query index")
    statement_type: str = Field(..., description="Type of SQL statement (e.g., DROP)")
    reason: str = Field(..., description="Reason for skipping")
    query_preview: str = Field(..., description="First 100 chars of query")
