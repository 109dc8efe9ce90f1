"""
Configuration management for the Redline Comparator.

This module handles all comparator configuration using Pydantic settings.
Environment variables (prefixed ``REDLINE_``) are loaded from a .env file or
the system environment.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from redline.services.classifier import STRUCTURAL_LENGTH_THRESHOLD
from redline.services.similarity import SIMILARITY_PAIR_THRESHOLD


class Settings(BaseSettings):
    """
    Comparator settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via environment variables.
    """

    # Diff Analysis
    similarity_pair_threshold: float = Field(
        default=SIMILARITY_PAIR_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Change ratio below which two blocks are paired as a modification"
    )
    structural_length_threshold: int = Field(
        default=STRUCTURAL_LENGTH_THRESHOLD,
        gt=0,
        description="Changes longer than this many characters are structural"
    )
    report_whitespace_changes: bool = Field(
        default=True,
        description="Report whitespace-only edits between otherwise identical blocks"
    )

    # Section Mapping
    section_body_probe_length: int = Field(
        default=40,
        gt=0,
        description="Length of the body prefix used to locate a section's end"
    )
    section_chars_per_word: int = Field(
        default=6,
        gt=0,
        description="Characters per word when estimating a section's end"
    )

    # Logging
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or console)")

    model_config = SettingsConfigDict(
        env_prefix="REDLINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is supported."""
        allowed = ["json", "console"]
        if v.lower() not in allowed:
            raise ValueError(f"Log format must be one of {allowed}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Callers that need different thresholds should build their own
    ``Settings`` and hand it to the comparator instead.

    Returns:
        Settings: Comparator settings instance
    """
    return Settings()
