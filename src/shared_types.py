"""Shared enums and types for algo-rewind."""

from enum import StrEnum


class ProficiencyLevel(StrEnum):
    """Self-assessed understanding of a problem.

    The same values double as review outcomes: the outcome picked after a
    review becomes the problem's new level.
    """

    AGAIN = "AGAIN"
    HARD = "HARD"
    GOOD = "GOOD"
    EASY = "EASY"


# Outcome of a completed review session
ReviewOutcome = ProficiencyLevel


class SortKey(StrEnum):
    NEXT_REVIEW = "next_review"
    CREATED_AT = "created_at"
    NAME = "name"


class PersistenceBackend(StrEnum):
    JSON = "json"
    SQLITE = "sqlite"


class SchedulerBackend(StrEnum):
    LOCAL = "local"
    HTTP = "http"


class ViewBackend(StrEnum):
    BATCH = "batch"
    HTTP = "http"
    LOCAL = "local"
