"""Configuration and credential utilities."""

from toolhouse_connector.config.settings import settings, Settings
from toolhouse_connector.config.credentials import (
    CredentialStore,
    SettingsCredentialStore,
    StaticCredentialStore,
)

__all__ = [
    'settings',
    'Settings',
    'CredentialStore',
    'SettingsCredentialStore',
    'StaticCredentialStore',
]
