"""Extraction strategy interface."""

from typing import Protocol

from tasktracker.core.tasks import CandidateTask


class ExtractionStrategy(Protocol):
    """A way of turning a transcript into candidate tasks."""

    def extract(self, transcript: str) -> list[CandidateTask]:
        """Extract candidates. May raise ExtractionError."""
        ...
