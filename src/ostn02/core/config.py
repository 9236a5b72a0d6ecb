"""
Configuration settings for the ostn02 package.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Package settings with environment variable support.

    Attributes:
        grid_path: Path to the OSTN02_OSGM02_GB.txt correction grid (may be gzipped)
        grid_encoding: Text encoding of the grid file
        lookup_strategy: "indexed" to pre-load the grid, "streaming" to scan per call
        suspect_threshold: Malformed-record count after which a dataset is flagged suspect
        log_level: Default log level for setup_logging
        json_logs: Whether file logs are written as JSON
        log_file: Rotating log file used by setup_logging, if any
        environment: Deployment environment
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="OSTN02_",
    )

    # Grid data
    grid_path: Optional[Path] = None
    grid_encoding: str = "utf-8"
    lookup_strategy: Literal["indexed", "streaming"] = "indexed"
    suspect_threshold: int = Field(default=2, ge=1)

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[Path] = None

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Upper-case the log level name."""
        return value.strip().upper()


# Global settings instance
settings = Settings()
