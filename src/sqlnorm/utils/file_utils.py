"""Reading SQL input for sqlnorm."""

import sys
from pathlib import Path
from typing import Optional, TextIO

STDIN_MARKER = "-"


def read_sql_source(source: Path, stdin: Optional[TextIO] = None) -> str:
    """
    Read SQL text from a file, or from stdin when the path is ``-``.

    Args:
        source: Path to a UTF-8 SQL file, or ``Path("-")`` for stdin
        stdin: Stream used for ``-`` (defaults to ``sys.stdin``)

    Returns:
        The SQL text

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the path is a directory or the file is not UTF-8
    """
    if str(source) == STDIN_MARKER:
        return (stdin or sys.stdin).read()

    if not source.exists():
        raise FileNotFoundError(f"SQL file not found: {source}")

    if not source.is_file():
        raise ValueError(f"Path is not a file: {source}")

    try:
        return source.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"File {source} is not valid UTF-8: {e.reason}") from e
