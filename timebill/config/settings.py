"""
Configuration management for timebill.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TimebillConfig(BaseSettings):
    """Configuration settings for the reconciliation engine and CLI."""

    # Database Configuration
    database_path: str = Field(
        default="~/.timebill/timebill.db", alias="DATABASE_PATH"
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Invoicing Configuration
    invoice_due_days: int = Field(default=30, alias="INVOICE_DUE_DAYS")

    # Application Configuration
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("invoice_due_days")
    @classmethod
    def validate_due_days(cls, v):
        """Ensure invoices are due in the future."""
        if v <= 0:
            raise ValueError("Invoice due days must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    def get_database_file(self) -> Path:
        """Resolve the SQLite database path, expanding the user directory."""
        return Path(self.database_path).expanduser()


def load_config(env_file: Optional[str] = None) -> TimebillConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return TimebillConfig()


# Global configuration instance
_config: Optional[TimebillConfig] = None


def get_config() -> TimebillConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> TimebillConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
