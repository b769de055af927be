"""Session controller: orchestrates user operations against the problem store.

Every mutating operation runs to completion before the next one is accepted.
A mutating call that arrives while another is in flight is rejected with
``SessionBusyError`` rather than queued, so a double-submitted review can
never apply twice.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable, Iterable, Optional

import structlog

from observability import metrics
from shared_types import ProficiencyLevel, SortKey
from srs.intervals import today_iso

from .errors import (
    ConfirmationRequiredError,
    ModuleUnavailableError,
    PersistenceError,
    ProblemError,
    SessionBusyError,
    ValidationError,
)
from .models import Problem, ensure_utf8
from .persistence import PersistenceBridge
from .scheduling import SchedulingProvider, parse_level, parse_outcome
from .store import ProblemStore
from .transfer import decode_problems, encode_problems
from .views import ViewProvider, parse_sort_key

logger = structlog.get_logger()


@dataclass
class SessionSnapshot:
    """What the presentation layer renders after an operation."""

    due: list[Problem]
    problems: list[Problem]
    warnings: list[str] = field(default_factory=list)
    payload: Optional[bytes] = None


class SessionController:
    """Runs register / review / import / export / clear / search / sort."""

    def __init__(
        self,
        store: ProblemStore,
        scheduler: Optional[SchedulingProvider],
        views: ViewProvider,
        bridge: PersistenceBridge,
        clock: Callable[[], date] = date.today,
    ):
        self.store = store
        self.scheduler = scheduler
        self.views = views
        self.bridge = bridge
        self.clock = clock
        self.search_term = ""
        self.sort_key: Optional[SortKey] = None
        self.selected_id: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def _exclusive(self, operation: str):
        if self._lock.locked():
            logger.warning("operation_rejected_busy", operation=operation)
            raise SessionBusyError(f"Cannot {operation}: another operation is still running")
        async with self._lock:
            with metrics.timer(f"session.{operation}"):
                yield

    async def _schedule(self, operation: str, call: Callable[[], Awaitable[Problem]]) -> Problem:
        if self.scheduler is None:
            raise ModuleUnavailableError("Scheduling module is not available")
        try:
            return await call()
        except ProblemError:
            raise
        except Exception as e:
            logger.error("scheduler_failed", operation=operation, error=str(e))
            raise ModuleUnavailableError(f"Scheduling module failed: {e}") from e

    def _persist(self, warnings: list[str]) -> None:
        try:
            self.bridge.save(self.store.all())
        except PersistenceError as e:
            logger.warning("persist_failed", error=str(e))
            warnings.append(f"Auto-save failed: {e}")

    def today(self) -> str:
        return today_iso(self.clock())

    async def snapshot(self, warnings: Optional[list[str]] = None) -> SessionSnapshot:
        """Due-today view plus the all-problems view with search/sort applied."""
        problems = self.store.all()
        due = await self.views.due_today(problems, self.today())
        listed = problems
        if self.search_term:
            listed = await self.views.filter(listed, self.search_term)
        if self.sort_key is not None:
            listed = await self.views.sort(listed, self.sort_key)
        return SessionSnapshot(due=due, problems=listed, warnings=list(warnings or []))

    async def load(self) -> SessionSnapshot:
        """Fill the store from durable storage. Called once at startup."""
        warnings: list[str] = []
        async with self._exclusive("load"):
            try:
                problems = self.bridge.load()
            except PersistenceError as e:
                logger.warning("load_failed", error=str(e))
                warnings.append(f"Could not load saved data: {e}")
                problems = []
            if self.bridge.load_warning:
                warnings.append(self.bridge.load_warning)
            self.store.replace(problems)
            logger.info("problems_loaded", count=len(problems))
            return await self.snapshot(warnings)

    async def register(
        self,
        name: str,
        url: Optional[str] = None,
        tags: Iterable[str] = (),
        memo: str = "",
        level: ProficiencyLevel | str = ProficiencyLevel.GOOD,
    ) -> SessionSnapshot:
        """Create a problem through the scheduling module and store it."""
        warnings: list[str] = []
        async with self._exclusive("register"):
            clean_name = (name or "").strip()
            if not clean_name:
                raise ValidationError("Problem name is required")
            parsed_level = parse_level(level)
            clean_url = (url or "").strip() or None
            clean_tags = [t.strip() for t in tags if t and t.strip()]
            memo = memo or ""
            try:
                for text in (clean_name, clean_url or "", memo, *clean_tags):
                    ensure_utf8(text)
            except ValueError as e:
                raise ValidationError(str(e)) from None

            problem = await self._schedule(
                "create",
                lambda: self.scheduler.create(clean_name, clean_url, clean_tags, memo, parsed_level),
            )
            self.store.upsert(problem)
            logger.info("problem_registered", problem_id=problem.id, level=problem.level.value)
            self._persist(warnings)
            return await self.snapshot(warnings)

    def select_for_review(self, problem_id: str) -> Problem:
        """Open the review prompt for a problem that is due today or overdue."""
        problem = self.store.get(str(problem_id))
        if problem is None:
            raise ValidationError(f"No problem with id {problem_id}")
        if problem.next_review_at > self.today():
            raise ValidationError(f"{problem.name} is not due until {problem.next_review_at}")
        self.selected_id = problem.id
        return problem

    def cancel_review(self) -> None:
        self.selected_id = None

    async def complete_review(self, outcome: ProficiencyLevel | str) -> SessionSnapshot:
        """Apply the outcome to the selected problem and close the review prompt."""
        warnings: list[str] = []
        async with self._exclusive("complete_review"):
            if self.selected_id is None:
                raise ValidationError("No problem selected for review")
            parsed = parse_outcome(outcome)
            problem = self.store.get(self.selected_id)
            if problem is None:
                self.selected_id = None
                raise ValidationError("Selected problem is no longer in the store")

            updated = await self._schedule(
                "transition", lambda: self.scheduler.transition(problem, parsed)
            )
            if updated.id != problem.id:
                raise ModuleUnavailableError("Scheduling module returned a different problem")

            self.store.upsert(updated)
            self.selected_id = None
            logger.info(
                "review_completed",
                problem_id=updated.id,
                level=updated.level.value,
                next_review_at=updated.next_review_at,
            )
            self._persist(warnings)
            return await self.snapshot(warnings)

    async def import_payload(self, data: bytes | str) -> SessionSnapshot:
        """Replace the whole store with an imported problem list."""
        warnings: list[str] = []
        async with self._exclusive("import"):
            problems = decode_problems(data)
            self.store.replace(problems)
            if self.selected_id is not None and self.store.get(self.selected_id) is None:
                self.selected_id = None
            logger.info("problems_imported", count=len(problems))
            self._persist(warnings)
            return await self.snapshot(warnings)

    async def export_payload(self) -> SessionSnapshot:
        """Snapshot carrying the pretty-printed store, or a warning when empty."""
        problems = self.store.all()
        if not problems:
            return await self.snapshot(["No problems to export"])
        snap = await self.snapshot()
        snap.payload = encode_problems(problems)
        logger.info("problems_exported", count=len(problems))
        return snap

    async def clear(self, confirmed: bool = False) -> SessionSnapshot:
        """Empty the store and the durable record. Requires confirmation."""
        warnings: list[str] = []
        async with self._exclusive("clear"):
            if not confirmed:
                raise ConfirmationRequiredError("Clearing all problems requires confirmation")
            if not len(self.store):
                warnings.append("No problems to clear")
            removed = len(self.store)
            self.store.clear()
            self.selected_id = None
            try:
                self.bridge.clear()
            except PersistenceError as e:
                logger.warning("clear_persist_failed", error=str(e))
                warnings.append(f"Could not clear saved data: {e}")
            logger.info("problems_cleared", count=removed)
            return await self.snapshot(warnings)

    async def search(self, term: Optional[str]) -> SessionSnapshot:
        """Filter the all-problems view. A blank term shows everything."""
        self.search_term = (term or "").strip()
        return await self.snapshot()

    async def sort(self, key: SortKey | str | None) -> SessionSnapshot:
        """Order the all-problems view. ``None`` restores store order."""
        self.sort_key = parse_sort_key(key) if key is not None else None
        return await self.snapshot()
