"""Configuration system for Propsheet ingestion.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the listing-sheet pipeline.

Usage:
    from propsheet_ingest.config import PropsheetConfig

    # Load from environment variables and .env file
    config = PropsheetConfig()

    # Access parser settings
    print(config.parser.default_city)

    # Access ingestion settings
    print(config.ingestion.extraction_timeout)
"""

from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackend(str, Enum):
    """Supported document stores."""

    MEMORY = "memory"
    JSON = "json"


class LogFormat(str, Enum):
    """Log renderers."""

    CONSOLE = "console"
    JSON = "json"


class ParserConfig(BaseSettings):
    """Listing parser settings.

    Environment Variables:
        PROPSHEET_PARSER_DEFAULT_CITY: City assumed before any city line
        PROPSHEET_PARSER_CITY_TOKENS: JSON list of words marking city lines
        PROPSHEET_PARSER_INCLUDE_LEGACY_FIELDS: Fill status/contact/price/type/notes
        PROPSHEET_PARSER_STRICT_FLOOR_MATCHING: Whole-word floor codes only
    """

    model_config = SettingsConfigDict(
        env_prefix="PROPSHEET_PARSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_city: str = Field(
        default="south delhi",
        description="City assumed until the sheet names one",
    )
    city_tokens: list[str] = Field(
        default_factory=lambda: ["delhi"],
        description="Words that identify a city heading line",
    )
    include_legacy_fields: bool = Field(
        default=False,
        description="Extract status, contact, price, property type and notes",
    )
    strict_floor_matching: bool = Field(
        default=True,
        description="Require whole-word floor codes to treat a line as property data",
    )

    @field_validator("default_city")
    @classmethod
    def validate_default_city(cls, v: str) -> str:
        """Normalize the default city and ensure it is not empty."""
        v = v.strip().lower()
        if not v:
            raise ValueError("Default city cannot be empty")
        return v

    @field_validator("city_tokens")
    @classmethod
    def validate_city_tokens(cls, v: list[str]) -> list[str]:
        """Drop blank tokens and require at least one."""
        tokens = [token.strip() for token in v if token.strip()]
        if not tokens:
            raise ValueError("At least one city token is required")
        return tokens


class IngestionConfig(BaseSettings):
    """Ingestion pipeline settings.

    Environment Variables:
        PROPSHEET_INGEST_EXTRACTION_TIMEOUT: Seconds allowed for text extraction
        PROPSHEET_INGEST_MAX_UPLOAD_BYTES: Largest accepted document
        PROPSHEET_INGEST_EXPORT_ENABLED: Regenerate the Excel export after ingest
    """

    model_config = SettingsConfigDict(
        env_prefix="PROPSHEET_INGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    extraction_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for the text extraction step in seconds",
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Maximum accepted document size in bytes",
    )
    export_enabled: bool = Field(
        default=True,
        description="Regenerate the denormalized export after each ingestion",
    )


class StorageConfig(BaseSettings):
    """Storage settings.

    Environment Variables:
        PROPSHEET_STORAGE_BACKEND: memory or json
        PROPSHEET_STORAGE_DATA_DIR: Directory for the store and export files
        PROPSHEET_STORAGE_STORE_FILE: JSON store file name
        PROPSHEET_STORAGE_EXPORT_FILE: Excel export file name
    """

    model_config = SettingsConfigDict(
        env_prefix="PROPSHEET_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: StorageBackend = Field(
        default=StorageBackend.JSON,
        description="Document store implementation",
    )
    data_dir: str = Field(
        default="./data",
        description="Directory for data files",
    )
    store_file: str = Field(
        default="properties.jsonl",
        description="File name of the JSON-lines store",
    )
    export_file: str = Field(
        default="properties.xlsx",
        description="File name of the Excel export",
    )


class PropsheetConfig(BaseSettings):
    """Root configuration for Propsheet.

    Environment Variables:
        PROPSHEET_ENV: Environment name (development, staging, production, test)
        PROPSHEET_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        PROPSHEET_LOG_FORMAT: console or json

    Example:
        config = PropsheetConfig(
            parser=ParserConfig(include_legacy_fields=True),
            storage=StorageConfig(backend=StorageBackend.MEMORY),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="PROPSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Log renderer",
    )

    parser: ParserConfig = Field(default_factory=ParserConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"

    @property
    def store_path(self) -> Path:
        """Full path of the JSON store file."""
        return Path(self.storage.data_dir) / self.storage.store_file

    @property
    def export_path(self) -> Path:
        """Full path of the Excel export."""
        return Path(self.storage.data_dir) / self.storage.export_file
