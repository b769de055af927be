"""Import, export and clear commands for the whole problem list."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from cli.utils import get_components, print_warnings, run_or_exit
from problems.transfer import EXPORT_FILENAME

console = Console()


@click.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def import_problems(file: Path, yes: bool):
    """Replace all problems with the contents of an exported JSON file."""
    c = get_components()
    print_warnings(c["snapshot"].warnings)

    existing = len(c["store"])
    if existing and not yes:
        if not click.confirm(f"Replace {existing} existing problem(s) with {file.name}?"):
            return

    try:
        data = file.read_bytes()
    except OSError as e:
        console.print(f"[red]Could not read {file}:[/] {escape(str(e))}")
        sys.exit(1)

    snap = run_or_exit(c["controller"].import_payload(data))
    console.print(f"[green]Imported:[/] {len(snap.problems)} problem(s) from {file.name}")
    print_warnings(snap.warnings)


@click.command("export")
@click.option(
    "-o",
    "--output",
    default=EXPORT_FILENAME,
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Output file (default {EXPORT_FILENAME})",
)
def export_problems(output: Path):
    """Write all problems to a pretty-printed JSON file."""
    c = get_components()
    print_warnings(c["snapshot"].warnings)

    snap = run_or_exit(c["controller"].export_payload())
    if snap.payload is None:
        print_warnings(snap.warnings)
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(snap.payload)
    except OSError as e:
        console.print(f"[red]Could not write {output}:[/] {escape(str(e))}")
        sys.exit(1)
    console.print(f"[green]Exported:[/] {len(snap.problems)} problem(s) to {output}")


@click.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def clear(yes: bool):
    """Delete every problem and the saved data."""
    c = get_components()
    print_warnings(c["snapshot"].warnings)

    count = len(c["store"])
    if count and not yes:
        yes = click.confirm(f"Delete all {count} problem(s)? This cannot be undone.")
        if not yes:
            console.print("[yellow]Cancelled.[/]")
            return

    snap = run_or_exit(c["controller"].clear(confirmed=yes or not count))
    if count:
        console.print(f"[green]Cleared:[/] {count} problem(s)")
    print_warnings(snap.warnings)
