"""Configuration management for tagvalidator using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".tagvalidator.json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


class ValidatorConfig(BaseModel):
    """Validator configuration section."""
    tag_name: str = Field(alias="tagName", default="validate")
    json_tag: str = Field(alias="jsonTag", default="json")

    @field_validator("tag_name", "json_tag")
    @classmethod
    def validate_tag_key(cls, v):
        if not v or v != v.strip():
            raise ValueError("tag keys must be non-empty and have no surrounding spaces")
        return v

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARNING

    model_config = ConfigDict(use_enum_values=True)


class TagValidatorConfig(BaseModel):
    """Complete tagvalidator configuration model."""
    validator: ValidatorConfig = Field(default_factory=ValidatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest ``.tagvalidator.json`` in ``start_dir`` (default: cwd) or its ancestors."""
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            logger.debug(f"Using config file {candidate}")
            return candidate
    return None


def load_config(config_path: str | Path | None = None) -> TagValidatorConfig:
    """Read the configuration, falling back to defaults when there is no file.

    Without ``config_path`` the nearest ``.tagvalidator.json`` is used.

    Raises:
        ValueError: The file is not JSON or does not describe a valid configuration
    """
    path = find_config_file() if config_path is None else Path(config_path)
    if path is None or not path.is_file():
        return TagValidatorConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Failed to load config from {path}: {e}") from e

    try:
        return TagValidatorConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Failed to load config from {path}: {e}") from e
