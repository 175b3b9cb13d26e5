"""Configuration management for spreadsheet extraction.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
SPX_ prefix, or via a .env file in the project root.

Environment Variables:
    SPX_MAX_FILE_SIZE_MB: Maximum input file size in MB (default: 50)
    SPX_DECODE_MAX_WORKERS: Worker threads for worksheet decoding (default: 4)
    SPX_MIN_ENCODING_CONFIDENCE: Min chardet confidence for delimited text (default: 0.5)
    SPX_LOG_LEVEL: Logging level (default: INFO)
    SPX_DEBUG: Enable debug mode (default: false)
    SPX_CORS_ORIGINS: Comma-separated CORS origins (default: *)
    SPX_SERVER_HOST: Server bind host (default: 0.0.0.0)
    SPX_SERVER_PORT: Server bind port (default: 8000)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Example .env file:
        SPX_LOG_LEVEL=DEBUG
        SPX_DECODE_MAX_WORKERS=8
    """

    model_config = SettingsConfigDict(
        env_prefix="SPX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Input Settings
    # =========================================================================

    max_file_size_mb: int = 50
    """Maximum accepted input size in megabytes."""

    # =========================================================================
    # Decoding Settings
    # =========================================================================

    decode_max_workers: int = 4
    """Thread pool size for worksheet decoding. 1 decodes sequentially."""

    min_encoding_confidence: float = 0.5
    """Minimum chardet confidence before falling back to known encodings."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional error details."""

    # =========================================================================
    # Server Settings
    # =========================================================================

    cors_origins: str = "*"
    """Comma-separated list of allowed CORS origins, or * for all."""

    server_host: str = "0.0.0.0"
    """Host address for the server to bind to."""

    server_port: int = 8000
    """Port for the server to listen on."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Validate file size is positive and reasonable."""
        if not 1 <= v <= 500:
            raise ValueError(f"max_file_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("decode_max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if not 1 <= v <= 32:
            raise ValueError(f"decode_max_workers must be between 1 and 32, got {v}")
        return v

    @field_validator("min_encoding_confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        """Validate threshold is between 0.0 and 1.0."""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Threshold must be between 0.0 and 1.0, got {v}")
        return v

    @field_validator("server_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"server_port must be between 1 and 65535, got {v}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary suitable for logging."""
        return {
            "max_file_size_mb": self.max_file_size_mb,
            "decode_max_workers": self.decode_max_workers,
            "min_encoding_confidence": self.min_encoding_confidence,
            "log_level": self.log_level,
            "debug": self.debug,
            "cors_origins": self.cors_origins,
            "server_host": self.server_host,
            "server_port": self.server_port,
        }


def validate_settings_on_startup(s: Settings) -> None:
    """Log warnings for settings that are risky in production.

    Args:
        s: Settings instance to validate.
    """
    logger = logging.getLogger(__name__)

    if s.cors_origins == "*" and not s.debug:
        logger.warning(
            "CORS is configured to allow all origins (*). "
            "Consider restricting this in production."
        )

    if s.decode_max_workers == 1:
        logger.info("Worksheet decoding runs sequentially (decode_max_workers=1)")

    logger.info(
        f"Configuration loaded: log_level={s.log_level}, debug={s.debug}, "
        f"max_file_size_mb={s.max_file_size_mb}, "
        f"decode_max_workers={s.decode_max_workers}"
    )


settings = Settings()
