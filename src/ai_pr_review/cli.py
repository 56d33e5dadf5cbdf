"""Command-line interface for AI PR Review."""

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ai_pr_review import __version__
from ai_pr_review.classifier import classify_error
from ai_pr_review.config import SECRET_INPUTS, parse_configuration, read_inputs, require_secrets
from ai_pr_review.github.actions import apply_report
from ai_pr_review.orchestrator.orchestrator import run_review

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """AI PR Review - review pull requests with an LLM from GitHub Actions."""
    setup_logging(verbose)


@cli.command("run")
def run() -> None:
    """Review the pull request that triggered this workflow run.

    Inputs are read from INPUT_* environment variables and the event
    from GITHUB_EVENT_PATH.
    """
    report = asyncio.run(run_review(read_inputs()))

    status = report.review_status.value
    if report.failed:
        console.print(f"[red]❌ Review {status}[/red]")
    elif report.comment_posted:
        console.print(f"[green]✅ Review {status}, comment posted[/green]")
    else:
        console.print(f"✅ Review {status}")

    sys.exit(apply_report(report))


@cli.group("config")
def config_group() -> None:
    """Configuration commands."""
    pass


@config_group.command("validate")
def config_validate() -> None:
    """Validate the action inputs without calling any API."""
    inputs = read_inputs()
    try:
        parse_configuration(inputs)
        require_secrets(inputs)
    except Exception as e:
        console.print(f"[red]Configuration is invalid:[/red] {classify_error(e).message}")
        sys.exit(1)

    console.print("[green]✓ Configuration is valid[/green]")


@config_group.command("show")
def config_show() -> None:
    """Show the inputs the action would run with."""
    inputs = read_inputs()

    table = Table(title="Action Inputs")
    table.add_column("Input")
    table.add_column("Value")

    for name, value in inputs.items():
        if name in SECRET_INPUTS:
            value = "***" if value else "[red]<missing>[/red]"
        table.add_row(name, value)

    console.print(table)


if __name__ == "__main__":
    cli()
