"""HTTP clients for a remote scheduling service.

The service speaks the same record format as the batch API:

- ``POST /problems``          {name, url, tags, memo, level} -> problem
- ``POST /problems/review``   {problem, outcome} -> problem
- ``POST /views/due``         {problems, today} -> {problems}
- ``POST /views/filter``      {problems, term} -> {problems}
- ``POST /views/sort``        {problems, criteria} -> {problems}

Rejected input comes back as HTTP 422 with ``{"error": ..., "detail": ...}``.
"""

from typing import Any, Optional

import httpx
import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from shared_types import SortKey

from .errors import (
    InvalidLevelError,
    InvalidOutcomeError,
    ModuleUnavailableError,
    ValidationError,
    ViewProviderError,
)
from .models import Problem
from .scheduling import SchedulingProvider
from .views import ViewProvider

logger = structlog.get_logger()

_problem_list = TypeAdapter(list[Problem])

_REJECTIONS = {
    "validation": ValidationError,
    "invalid_level": InvalidLevelError,
    "invalid_outcome": InvalidOutcomeError,
}


class _ServiceClient:
    """Shared POST helper. One short-lived AsyncClient per call."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def post(self, path: str, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        ) as client:
            return await client.post(path, json=payload)


class HttpScheduler(SchedulingProvider):
    """Scheduling provider backed by a remote service. No fallback."""

    provider_name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._service = _ServiceClient(base_url, timeout, transport)

    async def _call(self, path: str, payload: dict) -> Problem:
        try:
            resp = await self._service.post(path, payload)
        except httpx.HTTPError as e:
            logger.warning("scheduler_unreachable", path=path, error=str(e))
            raise ModuleUnavailableError(f"Scheduling service unreachable: {e}") from e

        if resp.status_code == 422:
            body = _json_or_empty(resp)
            error_cls = _REJECTIONS.get(body.get("error"), ValidationError)
            raise error_cls(body.get("detail") or "Rejected by scheduling service")
        if resp.status_code >= 400:
            raise ModuleUnavailableError(f"Scheduling service returned HTTP {resp.status_code}")

        try:
            return Problem.model_validate_json(resp.content)
        except PydanticValidationError as e:
            raise ModuleUnavailableError("Scheduling service returned an invalid record") from e

    async def create(self, name, url, tags, memo, level) -> Problem:
        payload = {
            "name": name,
            "url": url,
            "tags": list(tags),
            "memo": memo,
            "level": str(level),
        }
        return await self._call("/problems", payload)

    async def transition(self, problem: Problem, outcome) -> Problem:
        payload = {"problem": problem.to_record(), "outcome": str(outcome)}
        return await self._call("/problems/review", payload)


class HttpViewProvider(ViewProvider):
    """Primary view provider backed by the remote service."""

    provider_name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._service = _ServiceClient(base_url, timeout, transport)

    async def _call(self, path: str, problems: list[Problem], **extra: Any) -> list[Problem]:
        payload = {"problems": [p.to_record() for p in problems], **extra}
        try:
            resp = await self._service.post(path, payload)
            resp.raise_for_status()
            return _problem_list.validate_python(resp.json()["problems"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            raise ViewProviderError(f"{path} failed: {e}") from e

    async def due_today(self, problems, today):
        return await self._call("/views/due", problems, today=today)

    async def filter(self, problems, term):
        return await self._call("/views/filter", problems, term=term)

    async def sort(self, problems, key):
        return await self._call("/views/sort", problems, criteria=SortKey(key).value)


def _json_or_empty(resp: httpx.Response) -> dict:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
