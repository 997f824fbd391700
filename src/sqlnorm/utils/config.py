"""Configuration management for sqlnorm.

Loads the ``[sqlnorm]`` table of ``sqlnorm.toml`` in the current working
directory.
"""

import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator
from rich.console import Console
from rich.markup import escape

from sqlnorm.global_models import OutputFormat, StatementKind

CONFIG_FILE_NAME = "sqlnorm.toml"

console = Console(stderr=True)


class ConfigSettings(BaseModel):
    """Configuration settings for sqlnorm.

    All fields are optional. None means the setting was not specified in
    the config file and the CLI default applies.
    """

    dialect: Optional[str] = None
    output_format: Optional[OutputFormat] = None
    statement_type: Optional[StatementKind] = None

    @field_validator("dialect")
    @classmethod
    def _dialect_is_lowercase(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value

    @field_validator("statement_type", mode="before")
    @classmethod
    def _statement_type_is_uppercase(cls, value):
        return value.upper().replace("_", " ") if isinstance(value, str) else value


def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """Find sqlnorm.toml in a directory.

    Args:
        start_path: Directory to look in. Defaults to the current working
                   directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    config_path = (start_path or Path.cwd()) / CONFIG_FILE_NAME
    return config_path if config_path.is_file() else None


def _warn(message: str) -> ConfigSettings:
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
    console.print("[yellow]Using default settings[/yellow]")
    return ConfigSettings()


def load_config(config_path: Optional[Path] = None) -> ConfigSettings:
    """Load configuration from sqlnorm.toml.

    Priority order:
    1. Explicit config_path parameter
    2. sqlnorm.toml in current working directory
    3. Empty ConfigSettings (all None)

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        ConfigSettings with values from the TOML file. Always returns a valid
        object: a missing file is silent, while unreadable files, malformed
        TOML and invalid values print a warning and fall back to defaults.
        Unknown keys are ignored.
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        return ConfigSettings()

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        return _warn(f"Failed to parse {config_path}: {e}")
    except OSError as e:
        return _warn(f"Could not read {config_path}: {e}")

    section = toml_data.get("sqlnorm", {})
    if not isinstance(section, dict):
        return _warn(f"[sqlnorm] in {config_path} must be a table")

    try:
        return ConfigSettings(**section)
    except ValidationError as e:
        return _warn(f"Invalid configuration in {config_path}: {e}")
