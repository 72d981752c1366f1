"""
Application Configuration

Pydantic-based configuration management with environment variable support.
Provides type-safe access to all relay settings.
"""

import re
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gaterelay import __version__


class Environment(str, Enum):
    """Application environment enumeration."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """
    Relay settings with environment variable support.

    All settings can be overridden via environment variables.
    Both tokens are empty by default, which rejects every request
    until they are configured.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =================================================================
    # Application Settings
    # =================================================================
    APP_NAME: str = Field(default="Gate Relay", description="Application name")
    APP_VERSION: str = Field(default=__version__, description="Application version")
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )

    # =================================================================
    # Server Settings
    # =================================================================
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=3000, description="Server port")
    RELOAD: bool = Field(default=False, description="Enable auto-reload")

    # =================================================================
    # Token Settings
    # =================================================================
    SLACK_TOKEN: str = Field(
        default="",
        description="Verification token sent by the Slack slash command",
    )
    API_TOKEN: str = Field(
        default="",
        description="Token the gate device sends in X-API-Token",
    )

    # =================================================================
    # Gate Settings
    # =================================================================
    GATE_COMMAND_PATTERN: str = Field(
        default="(open)?.*gate",
        description="Case-insensitive pattern a slash command must match",
    )
    GATE_CONFIRM_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        description="Seconds the gate has to confirm it opened",
    )
    GATE_TIMEOUT_SCOPED: bool = Field(
        default=True,
        description="Ignore timeout checks scheduled by a superseded trigger",
    )

    # =================================================================
    # Notifier Settings
    # =================================================================
    NOTIFY_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout for replies posted to the Slack response URL",
    )

    # =================================================================
    # Logging Settings
    # =================================================================
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format (json or text)")

    # =================================================================
    # Validators
    # =================================================================
    @field_validator("GATE_CONFIRM_TIMEOUT_SECONDS", "NOTIFY_TIMEOUT_SECONDS")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Timeouts must be strictly positive."""
        if v <= 0:
            raise ValueError("timeout must be greater than zero")
        return v

    @field_validator("GATE_COMMAND_PATTERN")
    @classmethod
    def validate_command_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"GATE_COMMAND_PATTERN is not a valid regex: {e}") from e
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v

    # =================================================================
    # Properties
    # =================================================================
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def command_regex(self) -> "re.Pattern[str]":
        """Compiled slash-command pattern."""
        return re.compile(self.GATE_COMMAND_PATTERN, re.IGNORECASE)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
