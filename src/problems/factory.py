"""Provider factories driven by configuration."""

from datetime import date
from pathlib import Path
from typing import Callable, Mapping, Optional

from shared_types import PersistenceBackend, SchedulerBackend, ViewBackend

from .errors import ProblemError
from .persistence import JsonFileBridge, PersistenceBridge, SqliteBridge
from .scheduling import BatchScheduler, SchedulingProvider
from .views import BatchViewProvider, LocalViewProvider, ResilientViewProvider, ViewProvider


def create_scheduler(
    backend: str = "local",
    url: Optional[str] = None,
    timeout: float = 10.0,
    intervals: Optional[Mapping[str, int]] = None,
    clock: Callable[[], date] = date.today,
    transport=None,
) -> SchedulingProvider:
    """Create the single scheduling provider. There is no fallback wrapper.

    Args:
        backend: "local" (in-process batch API) or "http"
        url: Service base URL, required for "http"
        timeout: HTTP timeout in seconds
        intervals: Day counts per level for the local backend
        clock: Date source for the local backend
        transport: Pre-built httpx transport for testing/DI
    """
    resolved = SchedulerBackend(backend)
    if resolved == SchedulerBackend.LOCAL:
        return BatchScheduler(intervals=intervals, clock=clock)

    if not url:
        raise ProblemError("scheduler.url is required for the http backend")
    from .remote import HttpScheduler

    return HttpScheduler(url, timeout=timeout, transport=transport)


def create_view_provider(
    primary: str = "batch",
    url: Optional[str] = None,
    timeout: float = 10.0,
    transport=None,
) -> ViewProvider:
    """Create the view provider: the chosen primary wrapped with the local fallback."""
    resolved = ViewBackend(primary)
    if resolved == ViewBackend.LOCAL:
        return LocalViewProvider()
    if resolved == ViewBackend.BATCH:
        return ResilientViewProvider(BatchViewProvider())

    if not url:
        raise ProblemError("views.url is required for the http primary")
    from .remote import HttpViewProvider

    return ResilientViewProvider(HttpViewProvider(url, timeout=timeout, transport=transport))


def create_bridge(backend: str, store_file: Path, sqlite_db: Path) -> PersistenceBridge:
    if PersistenceBackend(backend) == PersistenceBackend.SQLITE:
        return SqliteBridge(sqlite_db)
    return JsonFileBridge(store_file)
