"""Pydantic configuration models for algo-rewind."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from shared_types import PersistenceBackend, ProficiencyLevel, SchedulerBackend, ViewBackend
from srs.intervals import DEFAULT_INTERVALS


class PathsConfig(BaseModel):
    """File paths configuration."""

    data_dir: Path = Path("~/.algo-rewind")
    store_file: Optional[Path] = None  # None = <data_dir>/problems.json
    sqlite_db: Optional[Path] = None  # None = <data_dir>/problems.db
    log_file: Optional[Path] = None  # None = no file logging

    @model_validator(mode="after")
    def expand_paths(self):
        """Expand ~ and fill paths derived from data_dir."""
        self.data_dir = self.data_dir.expanduser()
        self.store_file = (self.store_file or self.data_dir / "problems.json").expanduser()
        self.sqlite_db = (self.sqlite_db or self.data_dir / "problems.db").expanduser()
        if self.log_file:
            self.log_file = self.log_file.expanduser()
        return self


class PersistenceConfig(BaseModel):
    backend: PersistenceBackend = PersistenceBackend.JSON


class SchedulerConfig(BaseModel):
    """Scheduling module selection and interval policy."""

    backend: SchedulerBackend = SchedulerBackend.LOCAL
    url: Optional[str] = None
    timeout: float = 10.0
    intervals: dict[str, int] = Field(
        default_factory=lambda: {k.value: v for k, v in DEFAULT_INTERVALS.items()}
    )

    @field_validator("intervals")
    @classmethod
    def validate_intervals(cls, v: dict[str, int]) -> dict[str, int]:
        cleaned = {}
        for key, days in v.items():
            try:
                level = ProficiencyLevel(key.upper())
            except ValueError:
                raise ValueError(f"Unknown level in intervals: {key}") from None
            if days < 0:
                raise ValueError(f"Interval for {key} must be >= 0 days, got {days}")
            cleaned[level.value] = days
        return {**{k.value: d for k, d in DEFAULT_INTERVALS.items()}, **cleaned}

    @model_validator(mode="after")
    def require_url(self):
        if self.backend == SchedulerBackend.HTTP and not self.url:
            raise ValueError("scheduler.url is required when backend is http")
        return self


class ViewsConfig(BaseModel):
    """Primary view provider. The local fallback is always present."""

    primary: ViewBackend = ViewBackend.BATCH
    url: Optional[str] = None
    timeout: float = 5.0

    @model_validator(mode="after")
    def require_url(self):
        if self.primary == ViewBackend.HTTP and not self.url:
            raise ValueError("views.url is required when primary is http")
        return self


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    file_level: str = "DEBUG"
    json_mode: bool = False

    @field_validator("level", "file_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class RewindConfig(BaseModel):
    """Main configuration model."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    views: ViewsConfig = Field(default_factory=ViewsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "RewindConfig":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(mode="python")
