"""
Configuration settings - Infrastructure component for managing application configuration.
Uses Pydantic for validation and environment variable loading.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Backend connection configuration."""

    model_config = SettingsConfigDict(
        env_prefix='CAREER_COMPASS_API_',
        env_file='.env',
        extra='ignore',
        case_sensitive=False,
    )

    url: str = Field('http://localhost:8000/api')
    timeout_ms: int = Field(30000)
    health_timeout_ms: int = Field(5000)

    @field_validator('url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @field_validator('timeout_ms', 'health_timeout_ms')
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Ensure timeouts are positive."""
        return v if v > 0 else 30000


class SessionSettings(BaseSettings):
    """Session lifecycle configuration."""

    model_config = SettingsConfigDict(
        env_prefix='CAREER_COMPASS_SESSION_',
        env_file='.env',
        extra='ignore',
    )

    max_inactive_minutes: float = Field(30.0)
    store_path: str = Field('~/.career_compass/session.json')

    @field_validator('max_inactive_minutes')
    @classmethod
    def validate_inactive(cls, v: float) -> float:
        return v if v > 0 else 30.0


class RetrySettings(BaseSettings):
    """Retry and backoff configuration."""

    model_config = SettingsConfigDict(
        env_prefix='CAREER_COMPASS_RETRY_',
        env_file='.env',
        extra='ignore',
    )

    max_attempts: int = Field(3)
    base_delay_ms: int = Field(1000)

    @field_validator('base_delay_ms')
    @classmethod
    def validate_delay(cls, v: int) -> int:
        return max(0, v)


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix='CAREER_COMPASS_',
        env_file='.env',
        extra='ignore',
        case_sensitive=False,
    )

    # Sub-configurations
    api: ApiSettings = Field(default_factory=ApiSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)

    # Logging
    log_level: str = Field('INFO')
    log_format: str = Field('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            return 'INFO'
        return v.upper()

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            'api': self.api.model_dump(),
            'session': self.session.model_dump(),
            'retry': self.retry.model_dump(),
            'log_level': self.log_level,
        }


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Reload settings from environment (for testing)."""
    global _settings
    _settings = AppSettings()
    return _settings
