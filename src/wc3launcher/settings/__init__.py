"""User settings persistence.

Provides the UserSettings model and the crash-safe SettingsStore that keeps
it on disk between runs.
"""

from ._models import DEFAULT_ADDRESS, DEFAULT_SETTINGS, DEFAULT_VERSION, UserSettings
from ._store import SettingsStore

__all__ = [
    "DEFAULT_ADDRESS",
    "DEFAULT_SETTINGS",
    "DEFAULT_VERSION",
    "SettingsStore",
    "UserSettings",
]
