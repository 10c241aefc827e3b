"""Notification service interface."""

from datetime import datetime
from typing import Protocol


class NotificationServiceError(Exception):
    """Raised when the service rejects a create or cancel request."""

    pass


class NotificationService(Protocol):
    """
    Interface for a local notification backend.

    Pending notifications are owned by the backend and keyed by string
    identifiers. Creating an identifier that is already pending is an error,
    not a replace. Cancelling an unknown identifier is a no-op.
    """

    def create(self, identifier: str, title: str, body: str, fire_at: datetime) -> None:
        """Schedule a one-shot notification."""
        ...

    def cancel(self, identifiers: list[str]) -> None:
        """Remove pending notifications by identifier."""
        ...
