"""AI PR Review - CI step that reviews pull requests with an LLM via OpenRouter."""

__version__ = "0.1.0"
