"""Error taxonomy for the problem review engine."""


class ProblemError(Exception):
    """Base error for every failure the engine reports."""


class ValidationError(ProblemError):
    """Empty or invalid user-supplied field."""


class InvalidLevelError(ValidationError):
    """Proficiency level outside the recognized set."""


class InvalidOutcomeError(ValidationError):
    """Review outcome outside the recognized set."""


class ConfirmationRequiredError(ValidationError):
    """Destructive operation attempted without explicit confirmation."""


class ModuleUnavailableError(ProblemError):
    """Scheduling module cannot be called. Creation and review have no fallback."""


class ImportParseError(ProblemError):
    """Import payload is not a valid problem list."""


class PersistenceError(ProblemError):
    """Durable read or write failed."""


class SessionBusyError(ProblemError):
    """Another mutating operation is still in flight."""


class ViewProviderError(ProblemError):
    """Primary view provider failed. Recovered by the local fallback."""
