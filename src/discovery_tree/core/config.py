"""
Configuration management for Discovery Tree based on Pydantic Settings.

Supported sources:
- Environment variables (``DISCOVERY_TREE_*``)
- .env files
- Explicit keyword overrides
"""

from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

from pydantic import Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings

from discovery_tree.core.exceptions import ConfigurationError

DEFAULT_DATA_PATH = "./data/tasks.json"

LOG_LEVELS = ("debug", "info", "warn", "error")


class StorageConfig(BaseSettings):
    """File-backed task store settings."""

    data_path: str = Field(default=DEFAULT_DATA_PATH, description="Path to the JSON task file")

    model_config = {"env_prefix": "DISCOVERY_TREE_STORAGE_", "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Structured logging settings."""

    level: str = Field(default="info", description="Logging level: debug, info, warn, error")
    format: Literal["console", "json"] = Field(default="console", description="Renderer for log events")
    include_timestamps: bool = Field(default=True, description="Add ISO timestamps to log events")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept the four supported levels, case-insensitively."""
        normalized = v.strip().lower()
        if normalized not in LOG_LEVELS:
            raise ValueError(
                f"invalid log level: {v} (must be one of: {', '.join(LOG_LEVELS)})"
            )
        return normalized

    model_config = {"env_prefix": "DISCOVERY_TREE_LOG_", "extra": "ignore"}


class DiscoveryTreeConfig(BaseSettings):
    """Main Discovery Tree configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "DiscoveryTreeConfig":
        """Load configuration from environment variables and an optional .env file.

        The file is handed to every sub-config: each one only reads keys
        under its own prefix. Real environment variables win over the file.
        """
        env_path = str(env_file) if env_file else ".env"
        try:
            return cls(
                storage=StorageConfig(_env_file=env_path),
                logging=LoggingConfig(_env_file=env_path),
                _env_file=env_path,
            )
        except PydanticValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            key = ".".join(str(part) for part in first.get("loc", ()))
            raise ConfigurationError(
                f"Invalid configuration: {first.get('msg', str(e))}",
                config_key=key or None,
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a dictionary."""
        return self.model_dump()

    model_config = {
        "env_prefix": "DISCOVERY_TREE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }
