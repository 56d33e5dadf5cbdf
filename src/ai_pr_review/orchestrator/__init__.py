"""Orchestrator components for AI PR Review."""

from ai_pr_review.orchestrator.orchestrator import ReviewOrchestrator, run_review

__all__ = [
    "ReviewOrchestrator",
    "run_review",
]
