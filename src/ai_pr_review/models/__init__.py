"""Data models for AI PR Review."""

from ai_pr_review.models.context import PullRequestContext
from ai_pr_review.models.review import (
    ExecutionReport,
    ExistingReview,
    FileChange,
    ReviewFailure,
    ReviewOutcome,
    ReviewSkipped,
    ReviewStatus,
    ReviewSuccess,
)

__all__ = [
    "ExecutionReport",
    "ExistingReview",
    "FileChange",
    "PullRequestContext",
    "ReviewFailure",
    "ReviewOutcome",
    "ReviewSkipped",
    "ReviewStatus",
    "ReviewSuccess",
]
