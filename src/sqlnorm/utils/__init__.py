"""Utility functions for sqlnorm."""

from sqlnorm.utils.config import ConfigSettings, find_config_file, load_config
from sqlnorm.utils.file_utils import read_sql_source

__all__ = [
    "ConfigSettings",
    "find_config_file",
    "load_config",
    "read_sql_source",
]
