"""File-based notification preferences adapter."""

import json
import logging
from pathlib import Path

from tasktracker.core.notifications import NotificationPreferences

logger = logging.getLogger(__name__)


class FilePreferencesStore:
    """
    Notification preferences in a small JSON file.

    Implements PreferencesStore protocol. Keys are notificationsEnabled,
    notifyOnDueDate, dailyDigestEnabled and weeklyDigestEnabled.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> NotificationPreferences:
        """Load preferences. Missing or unreadable files give defaults."""
        if not self.path.exists():
            return NotificationPreferences()
        try:
            data = json.loads(self.path.read_text())
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return NotificationPreferences.from_dict(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to read preferences from {self.path}: {e}")
            return NotificationPreferences()

    def save(self, prefs: NotificationPreferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(prefs.to_dict(), indent=2))
