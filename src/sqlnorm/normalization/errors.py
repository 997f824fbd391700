"""Exceptions raised while normalizing SQL statements."""

from typing import Optional


class NormalizationError(Exception):
    """Base exception for statement normalization failures."""

    pass


class NumericConversionError(NormalizationError):
    """A numeric literal could not be represented as an unsigned 64-bit integer.

    Raised for out-of-range values, malformed digits (``1.5``, ``1e3``) and
    negated literals in LIMIT/OFFSET. The whole extraction call fails; no
    partial model is returned.
    """

    def __init__(self, literal: str, context: Optional[str] = None):
        self.literal = literal
        self.context = context
        location = f" in {context}" if context else ""
        super().__init__(
            f"Cannot convert numeric literal '{literal}'{location} "
            "to an unsigned 64-bit integer"
        )


class UnsupportedStatementError(NormalizationError):
    """The statement kind is outside SELECT/INSERT/UPDATE/DELETE/CREATE TABLE."""

    def __init__(self, statement_type: str):
        self.statement_type = statement_type
        super().__init__(f"Unsupported statement type: {statement_type}")
