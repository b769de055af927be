"""Derived views over the problem list: due today, free-text filter, sort.

Each view has a primary provider and a local fallback. Both must return the
same problems in the same order for the same input; ``ResilientViewProvider``
hides primary failures behind the fallback.
"""

import json
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

import srs.batch as batch
from observability import metrics
from shared_types import SortKey

from .errors import ValidationError, ViewProviderError
from .models import Problem

logger = structlog.get_logger()

_problem_list = TypeAdapter(list[Problem])


def parse_sort_key(value) -> SortKey:
    try:
        return SortKey(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(k.value for k in SortKey)
        raise ValidationError(f"Invalid sort key: {value}. Must be one of {valid}") from None


def collation_key(text: str) -> str:
    """Locale-independent collation key for problem names."""
    return batch.collate(text)


class ViewProvider(ABC):
    """Computes read-only views. Implementations never mutate their input."""

    provider_name: str = "base"

    @abstractmethod
    async def due_today(self, problems: list[Problem], today: str) -> list[Problem]:
        """Problems with ``next_review_at <= today``, in input order."""
        ...

    @abstractmethod
    async def filter(self, problems: list[Problem], term: str) -> list[Problem]:
        """Problems whose name or any tag contains ``term``, ignoring case."""
        ...

    @abstractmethod
    async def sort(self, problems: list[Problem], key: SortKey) -> list[Problem]:
        """New list ordered by ``key``; ties keep input order."""
        ...


class LocalViewProvider(ViewProvider):
    """Views computed directly on model objects."""

    provider_name = "local"

    async def due_today(self, problems, today):
        return [p for p in problems if p.next_review_at <= today]

    async def filter(self, problems, term):
        needle = term.lower()
        return [
            p
            for p in problems
            if needle in p.name.lower() or any(needle in tag.lower() for tag in p.tags)
        ]

    async def sort(self, problems, key):
        key = SortKey(key)
        if key == SortKey.NEXT_REVIEW:
            return sorted(problems, key=lambda p: p.next_review_at)
        if key == SortKey.CREATED_AT:
            return sorted(problems, key=lambda p: p.created_at, reverse=True)
        return sorted(problems, key=lambda p: collation_key(p.name))


class BatchViewProvider(ViewProvider):
    """Views delegated to the scheduling module's batch API over JSON records."""

    provider_name = "batch"

    def _call(self, fn, problems: list[Problem], *args) -> list[Problem]:
        payload = json.dumps([p.to_record() for p in problems], ensure_ascii=False)
        try:
            raw = fn(payload, *args)
            return _problem_list.validate_json(raw)
        except (batch.BatchError, PydanticValidationError) as e:
            raise ViewProviderError(f"{fn.__name__} failed: {e}") from e

    async def due_today(self, problems, today):
        return self._call(batch.get_today_reviews, problems, today)

    async def filter(self, problems, term):
        return self._call(batch.filter_problems, problems, term)

    async def sort(self, problems, key):
        return self._call(batch.sort_problems, problems, SortKey(key).value)


class ResilientViewProvider(ViewProvider):
    """Try the primary provider, fall back to the local one on any failure."""

    def __init__(self, primary: ViewProvider, fallback: Optional[ViewProvider] = None):
        self.primary = primary
        self.fallback = fallback or LocalViewProvider()
        self.provider_name = f"{primary.provider_name}+{self.fallback.provider_name}"

    async def _run(
        self,
        view: str,
        primary: Callable[[], Awaitable[list[Problem]]],
        fallback: Callable[[], Awaitable[list[Problem]]],
    ) -> list[Problem]:
        try:
            return await primary()
        except Exception as e:
            logger.warning(
                "view_primary_failed",
                view=view,
                provider=self.primary.provider_name,
                error=str(e),
            )
            metrics.counter("views.fallback")
            return await fallback()

    async def due_today(self, problems, today):
        return await self._run(
            "due_today",
            lambda: self.primary.due_today(problems, today),
            lambda: self.fallback.due_today(problems, today),
        )

    async def filter(self, problems, term):
        return await self._run(
            "filter",
            lambda: self.primary.filter(problems, term),
            lambda: self.fallback.filter(problems, term),
        )

    async def sort(self, problems, key):
        return await self._run(
            "sort",
            lambda: self.primary.sort(problems, key),
            lambda: self.fallback.sort(problems, key),
        )
