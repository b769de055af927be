"""In-memory problem store: the session's single source of truth."""

from typing import Iterable, Optional

from .models import Problem


class ProblemStore:
    """Ordered collection of problems keyed by id.

    Problems keep registration order. There is deliberately no single-item
    delete: problems leave the store only through ``clear()`` or ``replace()``.
    """

    def __init__(self, problems: Optional[Iterable[Problem]] = None):
        self._problems: list[Problem] = []
        if problems is not None:
            self.replace(problems)

    def all(self) -> list[Problem]:
        """Return a copy of the problems in store order."""
        return list(self._problems)

    def get(self, problem_id: str) -> Optional[Problem]:
        for p in self._problems:
            if p.id == problem_id:
                return p
        return None

    def replace(self, problems: Iterable[Problem]) -> None:
        """Swap the whole collection, keeping the given order."""
        self._problems = list(problems)

    def upsert(self, problem: Problem) -> None:
        """Replace the problem with the same id in place, or append it."""
        for i, p in enumerate(self._problems):
            if p.id == problem.id:
                self._problems[i] = problem
                return
        self._problems.append(problem)

    def clear(self) -> None:
        self._problems = []

    def __len__(self) -> int:
        return len(self._problems)

    def __iter__(self):
        return iter(list(self._problems))
