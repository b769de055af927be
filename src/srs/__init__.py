"""Scheduling module: interval policy and the JSON batch API."""

from .batch import BatchError, InvalidLevel, InvalidName, collate, parse_level
from .intervals import DEFAULT_INTERVALS, calculate_next_review, today_iso

__all__ = [
    "BatchError",
    "InvalidLevel",
    "InvalidName",
    "collate",
    "parse_level",
    "DEFAULT_INTERVALS",
    "calculate_next_review",
    "today_iso",
]
