"""Read the pull request that triggered the workflow run."""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ai_pr_review.errors import PullRequestContextError
from ai_pr_review.models.context import PullRequestContext

logger = logging.getLogger(__name__)


def load_event_payload(event_path: str | Path | None) -> dict[str, Any]:
    """Load the webhook payload GitHub Actions writes to GITHUB_EVENT_PATH.

    Returns an empty payload when the file is missing.

    Raises:
        PullRequestContextError: if the payload is not a JSON object
    """
    if not event_path:
        logger.debug("GITHUB_EVENT_PATH is not set")
        return {}

    path = Path(event_path)
    if not path.exists():
        logger.warning(f"Event payload {path} does not exist")
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PullRequestContextError(f"Could not parse event payload {path}: {e}") from e

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise PullRequestContextError(f"Event payload {path} is not a JSON object")
    return payload


def pull_request_from_payload(
    payload: Mapping[str, Any],
    repository: str | None = None,
) -> PullRequestContext | None:
    """Build the pull request context from an event payload.

    Args:
        payload: Parsed webhook payload
        repository: "owner/name" from GITHUB_REPOSITORY, preferred over the payload

    Returns:
        PullRequestContext, or None if the event is not a pull request event
    """
    pr = payload.get("pull_request")
    if not pr:
        return None

    if repository and "/" in repository:
        owner, repo = repository.split("/", 1)
    else:
        repo_raw = payload.get("repository") or {}
        owner = (repo_raw.get("owner") or {}).get("login", "")
        repo = repo_raw.get("name", "")

    try:
        number = int(pr.get("number") or payload.get("number"))
    except (TypeError, ValueError) as e:
        raise PullRequestContextError(f"Event payload has no valid pull request number: {e}") from e

    return PullRequestContext(
        owner=owner,
        repo=repo,
        number=number,
        title=pr.get("title") or "",
        body=pr.get("body") or "",
    )


def load_pull_request_context(
    environ: Mapping[str, str] | None = None,
) -> PullRequestContext | None:
    """Resolve the triggering pull request from the Actions environment."""
    if environ is None:
        environ = os.environ

    payload = load_event_payload(environ.get("GITHUB_EVENT_PATH"))
    context = pull_request_from_payload(payload, environ.get("GITHUB_REPOSITORY"))
    if context is None:
        logger.debug(f"Event {environ.get('GITHUB_EVENT_NAME', '')!r} carries no pull request")
    return context
