"""Literal value normalization for sqlglot expression nodes."""

import re
from typing import Optional

from sqlglot import exp

from sqlnorm.normalization.errors import NumericConversionError
from sqlnorm.normalization.models import (
    U64_MAX,
    BooleanValue,
    LiteralValue,
    TextValue,
    UnsignedIntegerValue,
)

_UNSIGNED_INTEGER_RE = re.compile(r"[0-9]+")


def parse_unsigned_integer(text: str, context: Optional[str] = None) -> int:
    """
    Parse an integer token into the unsigned 64-bit range.

    Args:
        text: Token text as produced by the parser (e.g. "20")
        context: Optional description of where the token appeared, used in
            the error message

    Returns:
        The parsed integer

    Raises:
        NumericConversionError: If the token is not plain digits or does not
            fit in 64 bits
    """
    if not _UNSIGNED_INTEGER_RE.fullmatch(text):
        raise NumericConversionError(text, context)

    value = int(text)
    if value > U64_MAX:
        raise NumericConversionError(text, context)
    return value


def normalize_literal(
    node: Optional[exp.Expression], context: Optional[str] = None
) -> Optional[LiteralValue]:
    """
    Convert a literal expression into a LiteralValue.

    Strings become TextValue, numbers UnsignedIntegerValue and TRUE/FALSE
    BooleanValue. Any other shape (NULL, negated numbers, placeholders,
    function calls) is not a recognized literal and yields None.

    Args:
        node: Expression to inspect
        context: Optional location description for numeric errors

    Returns:
        The normalized value, or None if the node is not a recognized literal

    Raises:
        NumericConversionError: If a number literal is not a valid unsigned
            64-bit integer
    """
    if isinstance(node, exp.Boolean):
        return BooleanValue(value=bool(node.this))

    if isinstance(node, exp.Literal):
        if node.is_string:
            return TextValue(value=node.this)
        return UnsignedIntegerValue(value=parse_unsigned_integer(node.this, context))

    return None
