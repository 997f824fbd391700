"""SQL statement normalization into a uniform structural model."""

from sqlnorm.normalization.analyzer import (
    StatementNormalizer,
    classify_statement,
    normalize_sql,
    normalize_statement,
)
from sqlnorm.normalization.errors import (
    NormalizationError,
    NumericConversionError,
    UnsupportedStatementError,
)
from sqlnorm.normalization.models import (
    BooleanValue,
    LiteralValue,
    NormalizedStatementModel,
    QueryMetadata,
    QueryNormalizationResult,
    SkippedStatement,
    TableReference,
    TextValue,
    UnsetValue,
    UnsignedIntegerValue,
)

__all__ = [
    "BooleanValue",
    "LiteralValue",
    "NormalizationError",
    "NormalizedStatementModel",
    "NumericConversionError",
    "QueryMetadata",
    "QueryNormalizationResult",
    "SkippedStatement",
    "StatementNormalizer",
    "TableReference",
    "TextValue",
    "UnsetValue",
    "UnsignedIntegerValue",
    "UnsupportedStatementError",
    "classify_statement",
    "normalize_sql",
    "normalize_statement",
]
