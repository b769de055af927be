"""Entry point for the rewind CLI."""

import click
from rich.console import Console
from rich.markup import escape

from cli.commands import (
    add,
    clear,
    due,
    export_problems,
    import_problems,
    init,
    list_problems,
    review,
    search,
    show,
)
from cli.config import load_config, setup_logging
from observability import log_run_summary

console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="rewind")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Algo Rewind - spaced review for solved algorithm problems."""
    try:
        config = load_config()
    except ValueError as e:
        console.print(f"[red]Config error:[/] {escape(str(e))}")
        ctx.exit(1)
    setup_logging(config, verbose=verbose)
    if verbose:
        ctx.call_on_close(log_run_summary)


# === Problem Commands ===
cli.add_command(add)
cli.add_command(list_problems)
cli.add_command(search)
cli.add_command(due)
cli.add_command(show)
cli.add_command(review)

# === Data Commands ===
cli.add_command(import_problems)
cli.add_command(export_problems)
cli.add_command(clear)
cli.add_command(init)


if __name__ == "__main__":
    cli()
