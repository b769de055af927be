"""Import/export codec: a JSON array of problem records."""

import json
from typing import Iterable, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ImportParseError
from .models import Problem

EXPORT_FILENAME = "algo-rewind.json"

_problem_list = TypeAdapter(list[Problem])


def encode_problems(problems: Iterable[Problem], indent: Optional[int] = 2) -> bytes:
    """Serialize problems in the given order. Pretty-printed unless ``indent`` is None."""
    records = [p.to_record() for p in problems]
    return json.dumps(records, indent=indent, ensure_ascii=False).encode("utf-8")


def decode_problems(data: bytes | str) -> list[Problem]:
    """Parse a payload produced by ``encode_problems`` (or the browser app's export).

    Raises:
        ImportParseError: payload is not UTF-8 JSON, not an array, holds an
            invalid record, or repeats an id
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ImportParseError(f"Payload is not UTF-8 text: {e}") from e

    try:
        raw = json.loads(data)
    except ValueError as e:
        raise ImportParseError(f"Invalid JSON: {e}") from e
    if not isinstance(raw, list):
        raise ImportParseError("Expected a JSON array of problems")

    try:
        problems = _problem_list.validate_python(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(part) for part in first["loc"])
        raise ImportParseError(f"Invalid problem at {where}: {first['msg']}") from e

    seen: set[str] = set()
    for p in problems:
        if p.id in seen:
            raise ImportParseError(f"Duplicate problem id: {p.id}")
        seen.add(p.id)
    return problems
