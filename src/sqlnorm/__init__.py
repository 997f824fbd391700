"""sqlnorm - structural summaries of SQL statements."""

__version__ = "0.1.0"
