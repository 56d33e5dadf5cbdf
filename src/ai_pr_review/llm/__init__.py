"""LLM backend clients for AI PR Review."""

from ai_pr_review.llm.client import OpenRouterClient, OpenRouterConfig

__all__ = [
    "OpenRouterClient",
    "OpenRouterConfig",
]
