"""Shared CLI utilities."""

import asyncio
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


def get_components(config=None) -> dict:
    """Build the engine from config and load the saved problems.

    Returns dict with config, bridge, scheduler, views, store, controller and
    the snapshot produced by the initial load.
    """
    from cli.config import load_config
    from problems import ProblemStore, SessionController
    from problems.errors import ProblemError
    from problems.factory import create_bridge, create_scheduler, create_view_provider

    config = config or load_config()
    paths = config.paths

    try:
        bridge = create_bridge(config.persistence.backend, paths.store_file, paths.sqlite_db)
    except ProblemError as e:
        console.print(f"[red]Storage error:[/] {escape(str(e))}")
        sys.exit(1)

    scheduler = create_scheduler(
        backend=config.scheduler.backend,
        url=config.scheduler.url,
        timeout=config.scheduler.timeout,
        intervals=config.scheduler.intervals,
    )
    views = create_view_provider(
        primary=config.views.primary,
        url=config.views.url,
        timeout=config.views.timeout,
    )
    store = ProblemStore()
    controller = SessionController(store, scheduler, views, bridge)
    snapshot = run(controller.load())

    return {
        "config": config,
        "bridge": bridge,
        "scheduler": scheduler,
        "views": views,
        "store": store,
        "controller": controller,
        "snapshot": snapshot,
    }


def run(coro):
    """Run one controller coroutine to completion."""
    return asyncio.run(coro)


def run_or_exit(coro):
    """Run a controller coroutine, exiting with status 1 on an engine error."""
    from problems.errors import ProblemError

    try:
        return run(coro)
    except ProblemError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)


def print_warnings(warnings: list[str]) -> None:
    for w in warnings:
        console.print(f"[yellow]{escape(w)}[/]")


def split_tags(tags: Optional[str]) -> list[str]:
    """Split comma-separated tags, dropping blanks."""
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


def problem_table(problems, title: Optional[str] = None, today: Optional[str] = None) -> Table:
    """Rich table of problems. Overdue dates are highlighted when ``today`` is given."""
    table = Table(show_header=True, title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Tags", style="green")
    table.add_column("Level")
    table.add_column("Created", style="dim", width=10)
    table.add_column("Next review", width=11)

    for p in problems:
        due = p.next_review_at
        if today and due < today:
            due = f"[red]{due}[/]"
        elif today and due == today:
            due = f"[yellow]{due}[/]"
        table.add_row(
            escape(p.id), escape(p.name[:40]), escape(", ".join(p.tags[:4])), p.level.value, p.created_at, due
        )
    return table
