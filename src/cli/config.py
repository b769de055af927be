"""Configuration loading and logging setup."""

import os
from pathlib import Path
from typing import Optional

import yaml

from .config_models import RewindConfig
from .logging_config import setup_logging as setup_structlog

CONFIG_ENV_VAR = "ALGO_REWIND_CONFIG"


def find_config() -> Optional[Path]:
    """Find config file in standard locations."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    locations = [
        Path.cwd() / "config.yaml",
        Path.home() / ".algo-rewind" / "config.yaml",
    ]
    for loc in locations:
        if loc.exists():
            return loc
    return None


def load_config(config_path: Optional[Path] = None) -> RewindConfig:
    """Load configuration from file, or defaults when none exists."""
    base_config = {}

    path = config_path or find_config()
    if path and path.exists():
        try:
            with open(path) as f:
                base_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")
        if not isinstance(base_config, dict):
            raise ValueError(f"Config file must hold a mapping: {path}")

    try:
        return RewindConfig.from_dict(base_config)
    except Exception as e:
        raise ValueError(f"Config validation failed: {e}")


def setup_logging(config: RewindConfig, verbose: bool = False) -> None:
    """Configure logging from the config. ``verbose`` forces DEBUG on stderr."""
    log_cfg = config.logging
    setup_structlog(
        json_mode=log_cfg.json_mode,
        level="DEBUG" if verbose else log_cfg.level,
        log_file=config.paths.log_file,
        file_level=log_cfg.file_level,
    )
