"""Application settings management.

This package provides:
- UserSettings: User-configurable settings loaded from config.yaml
- ApplicationSettings: Internal application settings and defaults
"""

from batteryguard.settings.application import AppPaths, ApplicationSettings
from batteryguard.settings.user import UserSettings

__all__ = ["AppPaths", "ApplicationSettings", "UserSettings"]
