"""GitHub integration for AI PR Review."""

from ai_pr_review.github.client import AUTOMATION_LOGIN, GitHubClient, is_existing_ai_review
from ai_pr_review.github.event import load_pull_request_context
from ai_pr_review.github.formatter import AI_REVIEW_MARKER, format_review_comment

__all__ = [
    "AI_REVIEW_MARKER",
    "AUTOMATION_LOGIN",
    "GitHubClient",
    "format_review_comment",
    "is_existing_ai_review",
    "load_pull_request_context",
]
