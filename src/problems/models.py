"""Problem record: the single entity tracked by the review engine."""

import re
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared_types import ProficiencyLevel

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def ensure_utf8(text: str) -> str:
    """Reject text that cannot be written out as UTF-8, such as lone surrogates."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError("text must be valid UTF-8") from None
    return text


class Problem(BaseModel):
    """One algorithm-practice problem and its review schedule.

    Instances are immutable values: the scheduling module hands back a new
    Problem on every transition and the store swaps it in by id.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    url: Optional[str] = None
    tags: tuple[str, ...] = Field(default_factory=tuple)
    memo: str = ""
    level: ProficiencyLevel
    created_at: str
    next_review_at: str

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v):
        # Exports from the browser app used millisecond timestamps as ids
        if isinstance(v, bool):
            raise ValueError("id must be text or an integer")
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str) and v.strip():
            return ensure_utf8(v.strip())
        raise ValueError("id is required")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return ensure_utf8(v)

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("url must be text")
        return ensure_utf8(v.strip()) or None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(ensure_utf8(t.strip()) for t in v if t.strip())

    @field_validator("memo")
    @classmethod
    def validate_memo(cls, v: str) -> str:
        return ensure_utf8(v)

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("created_at", "next_review_at")
    @classmethod
    def validate_date(cls, v: str) -> str:
        if not _ISO_DATE.match(v):
            raise ValueError(f"expected YYYY-MM-DD, got {v!r}")
        date.fromisoformat(v)
        return v

    def to_record(self) -> dict:
        """Plain JSON-ready record with the wire field names."""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, data: dict) -> "Problem":
        return cls.model_validate(data)
