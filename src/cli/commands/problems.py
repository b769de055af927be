"""Problem registration, review and listing commands."""

import sys
from datetime import datetime
from typing import Optional

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from cli.utils import get_components, print_warnings, problem_table, run_or_exit, split_tags
from problems.errors import ProblemError
from shared_types import ProficiencyLevel, SortKey

console = Console()

LEVEL_CHOICES = [level.value for level in ProficiencyLevel]
SORT_CHOICES = [key.value for key in SortKey]


@click.command("add")
@click.argument("name")
@click.option("--url", help="Link to the problem statement")
@click.option("--tags", help="Comma-separated tags")
@click.option("-m", "--memo", default="", help="Free-form notes (markdown)")
@click.option(
    "-l",
    "--level",
    default=ProficiencyLevel.GOOD.value,
    type=click.Choice(LEVEL_CHOICES, case_sensitive=False),
    help="Initial proficiency level",
)
def add(name: str, url: Optional[str], tags: Optional[str], memo: str, level: str):
    """Register a solved problem and schedule its first review."""
    c = get_components()
    print_warnings(c["snapshot"].warnings)

    snap = run_or_exit(
        c["controller"].register(name, url=url, tags=split_tags(tags), memo=memo, level=level)
    )
    created = c["store"].all()[-1]
    console.print(f"[green]Added:[/] {escape(created.name)} [dim]({created.id})[/]")
    console.print(f"Next review: [cyan]{created.next_review_at}[/]")
    print_warnings(snap.warnings)


@click.command("list")
@click.option("-s", "--search", "term", help="Only problems whose name or tag contains this")
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice(SORT_CHOICES, case_sensitive=False),
    help="Order the list",
)
def list_problems(term: Optional[str], sort_key: Optional[str]):
    """List all problems."""
    c = get_components()
    controller = c["controller"]
    print_warnings(c["snapshot"].warnings)

    if term:
        run_or_exit(controller.search(term))
    snap = run_or_exit(controller.sort(sort_key))

    if not snap.problems:
        message = "No problems match that search." if term else "No problems yet. Add one with 'rewind add'."
        console.print(f"[yellow]{message}[/]")
        return

    console.print(problem_table(snap.problems, title=f"Problems ({len(snap.problems)})", today=controller.today()))


@click.command("search")
@click.argument("term")
def search(term: str):
    """Search problems by name or tag."""
    c = get_components()
    print_warnings(c["snapshot"].warnings)

    snap = run_or_exit(c["controller"].search(term))
    if not snap.problems:
        console.print("[yellow]No problems match that search.[/]")
        return
    console.print(problem_table(snap.problems, today=c["controller"].today()))


@click.command("due")
@click.option(
    "-d",
    "--date",
    "on_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Show what is due on this date instead of today",
)
def due(on_date: Optional[datetime]):
    """Show problems due for review."""
    c = get_components()
    controller = c["controller"]
    print_warnings(c["snapshot"].warnings)

    if on_date:
        controller.clock = on_date.date
    snap = run_or_exit(controller.snapshot())
    today = controller.today()

    if not snap.due:
        console.print(f"[green]Nothing due on {today}.[/]")
        return
    console.print(problem_table(snap.due, title=f"Due on {today} ({len(snap.due)})", today=today))


@click.command("show")
@click.argument("problem_id")
def show(problem_id: str):
    """Show one problem with its memo."""
    c = get_components()
    problem = c["store"].get(problem_id)
    if problem is None:
        console.print(f"[red]Not found:[/] {problem_id}")
        sys.exit(1)

    console.print(f"\n[cyan bold]{escape(problem.name)}[/] [dim]({problem.id})[/]")
    if problem.url:
        console.print(f"[blue]{escape(problem.url)}[/]")
    console.print(
        f"[dim]Level: {problem.level.value} | Created: {problem.created_at} | "
        f"Next review: {problem.next_review_at}[/]"
    )
    if problem.tags:
        console.print(f"[dim]Tags: {escape(', '.join(problem.tags))}[/]")
    if problem.memo:
        console.print()
        console.print(Markdown(problem.memo))


@click.command("review")
@click.argument("problem_id")
@click.option(
    "-o",
    "--outcome",
    type=click.Choice(LEVEL_CHOICES, case_sensitive=False),
    help="How the review went. Prompted for when omitted",
)
def review(problem_id: str, outcome: Optional[str]):
    """Record a review outcome and reschedule the problem."""
    c = get_components()
    controller = c["controller"]
    print_warnings(c["snapshot"].warnings)

    try:
        problem = controller.select_for_review(problem_id)
    except ProblemError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)
    console.print(f"Reviewing [cyan]{escape(problem.name)}[/] (current level {problem.level.value})")

    if not outcome:
        outcome = click.prompt(
            "Outcome",
            type=click.Choice(LEVEL_CHOICES, case_sensitive=False),
            default=problem.level.value,
        )

    snap = run_or_exit(controller.complete_review(outcome))
    updated = c["store"].get(problem.id)
    console.print(
        f"[green]Reviewed:[/] {escape(updated.name)} -> {updated.level.value}, "
        f"next review {updated.next_review_at}"
    )
    print_warnings(snap.warnings)