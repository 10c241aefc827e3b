"""Notification preferences storage interface."""

from typing import Protocol

from tasktracker.core.notifications import NotificationPreferences


class PreferencesStore(Protocol):
    """Interface for loading and saving notification preferences."""

    def load(self) -> NotificationPreferences:
        """Load preferences. Returns defaults if nothing is stored."""
        ...

    def save(self, prefs: NotificationPreferences) -> None:
        ...
