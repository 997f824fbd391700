"""Shared models and enums used across sqlnorm modules."""

from enum import Enum


class StatementKind(str, Enum):
    """Statement kinds the normalizer knows how to summarize."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CREATE_TABLE = "CREATE TABLE"


class OutputFormat(str, Enum):
    """Output format for CLI results."""

    TEXT = "text"
    JSON = "json"
    CSV = "csv"
    LINE = "line"
