"""Batch API of the scheduling module.

Every function takes and returns JSON text holding problem records with the
fields ``id``, ``name``, ``url``, ``tags``, ``memo``, ``level``,
``created_at`` and ``next_review_at``. Nothing is retained between calls.
"""

import json
import unicodedata
import uuid
from typing import Any, Optional

from shared_types import ProficiencyLevel

from .intervals import calculate_next_review, today_iso

RECORD_FIELDS = ("id", "name", "url", "tags", "memo", "level", "created_at", "next_review_at")
SORT_CRITERIA = ("next_review", "created_at", "name")


class BatchError(ValueError):
    """Malformed input handed to the batch API."""


class InvalidLevel(BatchError):
    """Level or outcome string outside the recognized set."""


class InvalidName(BatchError):
    """Problem name blank after trimming."""


def parse_level(value: str) -> ProficiencyLevel:
    """Parse a level case-insensitively."""
    try:
        return ProficiencyLevel(str(value).strip().upper())
    except ValueError:
        raise InvalidLevel(f"Invalid level: {value}") from None


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _load_records(problems_json: str) -> list[dict[str, Any]]:
    try:
        data = json.loads(problems_json)
    except (TypeError, ValueError) as e:
        raise BatchError(f"Deserialization error: {e}") from e
    if not isinstance(data, list):
        raise BatchError("Deserialization error: expected an array of problems")
    for record in data:
        _check_record(record)
    return data


def _load_record(problem_json: str) -> dict[str, Any]:
    try:
        record = json.loads(problem_json)
    except (TypeError, ValueError) as e:
        raise BatchError(f"Deserialization error: {e}") from e
    _check_record(record)
    return record


def _check_record(record: Any) -> None:
    if not isinstance(record, dict):
        raise BatchError("Deserialization error: problem must be an object")
    missing = [f for f in RECORD_FIELDS if f not in record]
    if missing:
        raise BatchError(f"Deserialization error: missing fields {', '.join(missing)}")
    if not isinstance(record["tags"], list):
        raise BatchError("Deserialization error: tags must be an array")
    for key in ("name", "created_at", "next_review_at"):
        if not isinstance(record[key], str):
            raise BatchError(f"Deserialization error: {key} must be a string")


def _dump(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False)


def add_problem(
    name: str,
    url: Optional[str],
    tags: list[str],
    memo: str,
    level: str,
    today: Optional[str] = None,
    intervals: Optional[dict] = None,
) -> str:
    """Create a problem record and return it as JSON."""
    parsed = parse_level(level)
    clean_name = (name or "").strip()
    if not clean_name:
        raise InvalidName("Problem name is required")

    created_at = today or today_iso()
    record = {
        "id": _new_id(),
        "name": clean_name,
        "url": (url or "").strip() or None,
        "tags": [t.strip() for t in tags if t and t.strip()],
        "memo": memo or "",
        "level": parsed.value,
        "created_at": created_at,
        "next_review_at": calculate_next_review(created_at, parsed, intervals),
    }
    return _dump(record)


def update_review(
    problem_json: str,
    new_level: str,
    today: Optional[str] = None,
    intervals: Optional[dict] = None,
) -> str:
    """Apply a review outcome to a problem record and return the new record."""
    record = _load_record(problem_json)
    level = parse_level(new_level)

    updated = dict(record)
    updated["level"] = level.value
    computed = calculate_next_review(today or today_iso(), level, intervals)
    # the due date only moves forward
    updated["next_review_at"] = max(record["next_review_at"], computed)
    return _dump(updated)


def get_today_reviews(problems_json: str, today: str) -> str:
    """Return the records due on or before ``today``."""
    records = _load_records(problems_json)
    return _dump([r for r in records if r["next_review_at"] <= today])


def filter_problems(problems_json: str, search_term: str) -> str:
    """Return records whose name or any tag contains the term, ignoring case."""
    records = _load_records(problems_json)
    needle = search_term.lower()
    return _dump(
        [
            r
            for r in records
            if needle in r["name"].lower() or any(needle in str(t).lower() for t in r["tags"])
        ]
    )


def collate(text: str) -> str:
    """Case- and accent-insensitive key for ordering names."""
    return unicodedata.normalize("NFKD", text).casefold()


def sort_problems(problems_json: str, criteria: str) -> str:
    """Sort records by ``next_review``, ``created_at`` (newest first) or ``name``."""
    if criteria not in SORT_CRITERIA:
        raise BatchError("Invalid sort criteria")
    records = _load_records(problems_json)

    if criteria == "next_review":
        records.sort(key=lambda r: r["next_review_at"])
    elif criteria == "created_at":
        records.sort(key=lambda r: r["created_at"], reverse=True)
    else:
        records.sort(key=lambda r: collate(r["name"]))
    return _dump(records)
