"""Configuration package."""

from .settings import AppSettings, ApiSettings, SessionSettings, RetrySettings, get_settings, reload_settings

__all__ = ['AppSettings', 'ApiSettings', 'SessionSettings', 'RetrySettings', 'get_settings', 'reload_settings']
