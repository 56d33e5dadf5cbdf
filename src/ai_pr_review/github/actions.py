"""Publish a run's result to the GitHub Actions runner."""

import logging
import os
import uuid
from collections.abc import Mapping

import click

from ai_pr_review.models.review import ExecutionReport

logger = logging.getLogger(__name__)


def set_output(name: str, value: str, environ: Mapping[str, str] | None = None) -> None:
    """Set a step output.

    Writes to the GITHUB_OUTPUT file using the multi-line delimiter syntax.
    Outside a runner the value is only logged.
    """
    if environ is None:
        environ = os.environ

    output_path = environ.get("GITHUB_OUTPUT")
    if not output_path:
        logger.info(f"Output {name}: {value!r}")
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    logger.debug(f"Set output {name} ({len(value)} chars)")


def escape_command_data(message: str) -> str:
    """Escape text for a workflow command."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str) -> None:
    """Report the step as failed with an error annotation."""
    click.echo(f"::error::{escape_command_data(message)}")


def apply_report(report: ExecutionReport, environ: Mapping[str, str] | None = None) -> int:
    """Apply an execution report to the runner.

    Sets both outputs once and flags the step on failure.

    Returns:
        Process exit code
    """
    set_output("review_status", report.review_status.value, environ)
    set_output("review_comment", report.review_comment, environ)

    if report.failure is not None:
        set_failed(report.failure.message)
        return 1
    return 0
