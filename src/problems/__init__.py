"""Problem review engine: store, scheduling contract, views and session control."""

from .errors import (
    ConfirmationRequiredError,
    ImportParseError,
    InvalidLevelError,
    InvalidOutcomeError,
    ModuleUnavailableError,
    PersistenceError,
    ProblemError,
    SessionBusyError,
    ValidationError,
    ViewProviderError,
)
from .models import Problem
from .session import SessionController, SessionSnapshot
from .store import ProblemStore

__all__ = [
    "Problem",
    "ProblemStore",
    "SessionController",
    "SessionSnapshot",
    "ProblemError",
    "ValidationError",
    "InvalidLevelError",
    "InvalidOutcomeError",
    "ConfirmationRequiredError",
    "ModuleUnavailableError",
    "ImportParseError",
    "PersistenceError",
    "SessionBusyError",
    "ViewProviderError",
]
