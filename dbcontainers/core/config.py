"""
Configuration management for dbcontainers.

This module provides centralized configuration management using Pydantic settings
for type safety and environment variable support.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Supported environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"


class LoggingConfig(BaseSettings):
    """Configuration for logging system."""

    level: str = Field(default="INFO", description="Logging level")
    json_output: bool = Field(default=True, description="Output logs in JSON format")
    log_file: Optional[str] = Field(default=None, description="Log file path")

    model_config = SettingsConfigDict(env_prefix="LOG_")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()


class ContainerConfig(BaseSettings):
    """Configuration for container startup."""

    startup_timeout: int = Field(
        default=60, description="Seconds to wait for a container to become ready"
    )
    poll_interval: float = Field(
        default=1.0, description="Seconds between readiness checks"
    )
    stop_on_failure: bool = Field(
        default=True, description="Stop containers that fail to become ready"
    )

    model_config = SettingsConfigDict(env_prefix="CONTAINER_")

    @field_validator("startup_timeout")
    @classmethod
    def validate_startup_timeout(cls, v: int) -> int:
        """Validate startup timeout is positive."""
        if v <= 0:
            raise ValueError("Startup timeout must be positive")
        return v

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        """Validate poll interval is positive."""
        if v <= 0:
            raise ValueError("Poll interval must be positive")
        return v


class DbContainersConfig(BaseSettings):
    """Main configuration class for dbcontainers."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    container: ContainerConfig = Field(default_factory=ContainerConfig)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    def is_ci(self) -> bool:
        """Check if running in a CI environment."""
        return self.environment == Environment.CI


# Global configuration instance
config = DbContainersConfig()


def get_config() -> DbContainersConfig:
    """Get the global configuration instance."""
    return config


def set_config(new_config: DbContainersConfig) -> None:
    """Replace the global configuration instance."""
    global config
    config = new_config


def reload_config() -> DbContainersConfig:
    """Reload configuration from environment and files."""
    global config
    config = DbContainersConfig()
    return config
