"""Scheduling provider abstraction.

Creation and review transitions are owned by the scheduling module. Unlike
the read-only views there is no local fallback here: approximating the
schedule would silently diverge from the module's due-date policy, so an
unavailable module is an error.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Iterable, Mapping, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

import srs.batch as batch
from shared_types import ProficiencyLevel
from srs.intervals import today_iso

from .errors import InvalidLevelError, InvalidOutcomeError, ModuleUnavailableError, ValidationError
from .models import Problem

logger = structlog.get_logger()


def parse_level(value) -> ProficiencyLevel:
    """Parse a proficiency level, case-insensitively."""
    try:
        return batch.parse_level(value)
    except batch.InvalidLevel:
        raise InvalidLevelError(f"Invalid level: {value}") from None


def parse_outcome(value) -> ProficiencyLevel:
    """Parse a review outcome, case-insensitively."""
    try:
        return batch.parse_level(value)
    except batch.InvalidLevel:
        raise InvalidOutcomeError(f"Invalid outcome: {value}") from None


class SchedulingProvider(ABC):
    """Creates problems and applies review outcomes."""

    provider_name: str = "base"

    @abstractmethod
    async def create(
        self,
        name: str,
        url: Optional[str],
        tags: Iterable[str],
        memo: str,
        level: ProficiencyLevel | str,
    ) -> Problem:
        """Create a new problem.

        Raises:
            ValidationError: name blank after trimming
            InvalidLevelError: level not recognized
            ModuleUnavailableError: module cannot be reached
        """
        ...

    @abstractmethod
    async def transition(self, problem: Problem, outcome: ProficiencyLevel | str) -> Problem:
        """Return ``problem`` with the outcome applied as level and a new due date.

        Raises:
            InvalidOutcomeError: outcome not recognized
            ModuleUnavailableError: module cannot be reached
        """
        ...


class BatchScheduler(SchedulingProvider):
    """In-process scheduling through the ``srs`` batch API."""

    provider_name = "local"

    def __init__(
        self,
        intervals: Optional[Mapping[str, int]] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.intervals = dict(intervals) if intervals else None
        self.clock = clock

    def _today(self) -> str:
        return today_iso(self.clock())

    async def create(self, name, url, tags, memo, level) -> Problem:
        try:
            raw = batch.add_problem(
                name,
                url,
                list(tags),
                memo,
                str(level),
                today=self._today(),
                intervals=self.intervals,
            )
        except batch.InvalidName as e:
            raise ValidationError(str(e)) from e
        except batch.InvalidLevel as e:
            raise InvalidLevelError(str(e)) from e
        return _decode(raw)

    async def transition(self, problem: Problem, outcome) -> Problem:
        try:
            raw = batch.update_review(
                problem.model_dump_json(),
                str(outcome),
                today=self._today(),
                intervals=self.intervals,
            )
        except batch.InvalidLevel as e:
            raise InvalidOutcomeError(str(e)) from e
        except batch.BatchError as e:
            raise ModuleUnavailableError(f"Scheduling module rejected the record: {e}") from e
        return _decode(raw)


def _decode(raw: str) -> Problem:
    try:
        return Problem.model_validate_json(raw)
    except PydanticValidationError as e:
        logger.error("scheduler_invalid_record", error=str(e))
        raise ModuleUnavailableError("Scheduling module returned an invalid record") from e
