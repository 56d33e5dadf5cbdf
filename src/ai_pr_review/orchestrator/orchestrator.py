"""Run orchestration: turn a pull request event into a review outcome."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from ai_pr_review.classifier import classify_error
from ai_pr_review.config import Configuration, Secrets, parse_configuration, require_secrets
from ai_pr_review.errors import PullRequestContextError
from ai_pr_review.github.client import GitHubClient, is_existing_ai_review
from ai_pr_review.github.event import load_pull_request_context
from ai_pr_review.github.formatter import format_review_comment
from ai_pr_review.models.context import PullRequestContext
from ai_pr_review.models.review import (
    ExecutionReport,
    FileChange,
    ReviewFailure,
    ReviewSkipped,
    ReviewSuccess,
)
from ai_pr_review.review import get_review

logger = logging.getLogger(__name__)

SKIP_ALREADY_REVIEWED = "already reviewed"
SKIP_NO_CHANGED_FILES = "no changed files"
SKIP_NO_REVIEW = "no review produced"

ReviewGenerator = Callable[..., Awaitable[Any]]


class ReviewOrchestrator:
    """Runs the review pipeline once and reports a single outcome.

    Steps run strictly in order: validate inputs, require secrets, require a
    pull request, check for an earlier AI review, fetch changed files,
    generate the review, then optionally post it. Any failure is classified
    at the outermost boundary; only the comment post is best-effort.
    """

    def __init__(
        self,
        inputs: Mapping[str, str],
        context_loader: Callable[[], PullRequestContext | None] = load_pull_request_context,
        github_factory: Callable[[str], GitHubClient] = GitHubClient,
        review_generator: ReviewGenerator = get_review,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            inputs: Raw action inputs, including secrets
            context_loader: Returns the triggering pull request, or None
            github_factory: Builds a GitHub client from a token
            review_generator: Async callable producing the review text
            clock: Timestamp source for the comment footer
        """
        self.inputs = inputs
        self.context_loader = context_loader
        self.github_factory = github_factory
        self.review_generator = review_generator
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def run(self) -> ExecutionReport:
        """Run the pipeline; never raises."""
        try:
            return await self._run()
        except Exception as e:
            logger.debug("Review run failed", exc_info=True)
            return self._failure(e)

    def _failure(self, error: object) -> ExecutionReport:
        classified = classify_error(error)
        logger.error(f"[{classified.category.value}] {classified.message}")
        return ExecutionReport(outcome=ReviewFailure.from_classified(classified))

    async def _run(self) -> ExecutionReport:
        logger.info("Starting AI PR Review...")

        config = parse_configuration(self.inputs)
        secrets = require_secrets(self.inputs)

        pr = self.context_loader()
        if pr is None:
            raise PullRequestContextError(
                "This action can only be run on pull requests. "
                "Please ensure the workflow is triggered on pull_request events"
            )
        logger.info(f"Reviewing PR #{pr.number} in {pr.full_name}: {pr.title}")

        github = self.github_factory(secrets.github_token)

        existing = await asyncio.to_thread(github.list_reviews, pr.owner, pr.repo, pr.number)
        if any(is_existing_ai_review(review) for review in existing):
            logger.info("An AI review already exists for this pull request. Skipping.")
            return ExecutionReport(outcome=ReviewSkipped(SKIP_ALREADY_REVIEWED))

        files = await asyncio.to_thread(github.list_changed_files, pr.owner, pr.repo, pr.number)
        logger.info(f"Found {len(files)} changed files.")
        if not files:
            logger.info("No changed files found. Skipping review.")
            return ExecutionReport(outcome=ReviewSkipped(SKIP_NO_CHANGED_FILES))

        review = await self._generate(config, secrets, pr, files)
        if review is not None and not isinstance(review, str):
            # A collaborator handed back a failure value instead of raising
            return self._failure(review)
        if not review:
            logger.info("No review generated. Skipping.")
            return ExecutionReport(outcome=ReviewSkipped(SKIP_NO_REVIEW))

        logger.info(f"Review generated ({len(review)} chars)")

        posted = False
        if config.post_comment:
            posted = await self._post_comment(github, pr, config.model, review)
        else:
            logger.info("post_comment is false - review available in outputs only")

        return ExecutionReport(outcome=ReviewSuccess(review), comment_posted=posted)

    async def _generate(
        self,
        config: Configuration,
        secrets: Secrets,
        pr: PullRequestContext,
        files: list[FileChange],
    ) -> Any:
        return await self.review_generator(
            api_key=secrets.openrouter_api_key,
            files=files,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            timeout_ms=config.timeout_ms,
            exclude_patterns=config.exclude_patterns,
            pr_title=pr.title,
            pr_body=pr.body or "",
            review_type=config.review_type,
            retries=config.retries,
            custom_rules_path=config.custom_rules_path,
        )

    async def _post_comment(
        self,
        github: GitHubClient,
        pr: PullRequestContext,
        model: str,
        review: str,
    ) -> bool:
        """Post the review as a PR comment; failures only produce a warning."""
        logger.info("Posting AI review comment to PR...")
        try:
            body = format_review_comment(model, review, now=self.clock())
            await asyncio.to_thread(github.post_comment, pr.owner, pr.repo, pr.number, body)
        except Exception as e:
            logger.warning(f"Failed to post comment: {e}")
            return False

        logger.info(f"AI review comment posted successfully ({len(body)} chars)")
        return True


async def run_review(inputs: Mapping[str, str], **kwargs: Any) -> ExecutionReport:
    """Run a single review with the default collaborators."""
    return await ReviewOrchestrator(inputs, **kwargs).run()
