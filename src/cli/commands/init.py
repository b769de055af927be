"""Init CLI command."""

from pathlib import Path

import click
import yaml
from rich.console import Console

from cli.config import find_config, load_config
from shared_types import PersistenceBackend

console = Console()

MINIMAL_CONFIG = {
    "paths": {
        "data_dir": "~/.algo-rewind",
    },
    "persistence": {
        "backend": "json",
    },
    "scheduler": {
        "backend": "local",
        "intervals": {"AGAIN": 1, "HARD": 3, "GOOD": 7, "EASY": 30},
    },
    "views": {
        "primary": "batch",
    },
}


@click.command()
def init():
    """Create the data directory and a starter config."""
    config = load_config()
    paths = config.paths

    paths.data_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"[green]✓[/] data_dir: {paths.data_dir}")
    backend = config.persistence.backend
    store_path = paths.sqlite_db if backend == PersistenceBackend.SQLITE else paths.store_file
    console.print(f"[green]✓[/] {backend.value} store: {store_path}")

    if find_config() is None:
        config_path = Path.home() / ".algo-rewind" / "config.yaml"
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            yaml.dump(MINIMAL_CONFIG, f, default_flow_style=False, sort_keys=False)
        console.print(f"[green]✓[/] Created config: {config_path}")

    console.print("\n[bold]Next steps:[/]")
    console.print("  1. Run [cyan]rewind add 'Two Sum' --tags array,hash-map[/] after solving a problem")
    console.print("  2. Run [cyan]rewind due[/] each day to see what to review")
    console.print("  3. Run [cyan]rewind review <id>[/] to record how the review went")
