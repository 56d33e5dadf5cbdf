"""Map any caught failure onto a small, user-actionable taxonomy.

Classification is ordered and the first matching rule wins:

1. Structured failures raised on purpose by the pipeline (see ai_pr_review.errors).
2. Built-in TypeError: a required value was structurally absent.
3. InputRangeError: a numeric input was outside its range.
4. Any other exception, sniffed by message text. Message wording is not a stable
   contract, so this branch only exists for third-party failures nobody wrapped.
5. Anything that is not an exception at all.
"""

from dataclasses import dataclass
from enum import Enum

from ai_pr_review.errors import (
    ConfigurationError,
    InputRangeError,
    InvalidCustomRulesError,
    OpenRouterApiError,
    OpenRouterAuthError,
    OpenRouterError,
    OpenRouterRateLimitError,
    OpenRouterTimeoutError,
    PullRequestContextError,
)


class ErrorCategory(Enum):
    """Failure categories reported to the user."""

    CONFIGURATION = "configuration"
    INPUT_VALIDATION = "input_validation"
    CONTEXT = "context"
    UPSTREAM_AUTH = "upstream_auth"
    UPSTREAM_RATE_LIMIT = "upstream_rate_limit"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_API = "upstream_api"
    INVALID_CUSTOM_RULES = "invalid_custom_rules"
    GITHUB_API = "github_api"
    NETWORK = "network"
    UNEXPECTED = "unexpected"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassifiedError:
    """A failure category with the message shown to the user."""

    category: ErrorCategory
    message: str


# Substring rules for unclassified exceptions, checked in order
_MESSAGE_RULES: tuple[tuple[tuple[str, ...], ErrorCategory, str], ...] = (
    (
        ("github", "api"),
        ErrorCategory.GITHUB_API,
        "GitHub API error: {message}. Please check your GITHUB_TOKEN permissions.",
    ),
    (
        ("openrouter", "unauthorized"),
        ErrorCategory.UPSTREAM_API,
        "OpenRouter API error: {message}. Please check your OPENROUTER_API_KEY.",
    ),
    (
        ("network", "timeout"),
        ErrorCategory.NETWORK,
        "Network error: {message}. Please try again or check your connectivity.",
    ),
    (
        ("pull request", "context"),
        ErrorCategory.CONTEXT,
        "Action context error: {message}. This action must be run on pull requests.",
    ),
)


def _describe(value: object) -> str:
    """Textual form of any value, even one whose __str__ is broken."""
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)


def _classify_structured(error: Exception) -> ClassifiedError | None:
    message = _describe(error)

    if isinstance(error, OpenRouterAuthError):
        return ClassifiedError(ErrorCategory.UPSTREAM_AUTH, message)

    if isinstance(error, OpenRouterRateLimitError):
        retry = f" (retry after {error.retry_after}s)" if error.retry_after else ""
        return ClassifiedError(
            ErrorCategory.UPSTREAM_RATE_LIMIT,
            f"OpenRouter API rate limit exceeded. Please try again later{retry}.",
        )

    if isinstance(error, OpenRouterTimeoutError):
        return ClassifiedError(
            ErrorCategory.UPSTREAM_TIMEOUT,
            f"OpenRouter API request timed out after {error.timeout_ms}ms. "
            "Consider increasing request_timeout_seconds.",
        )

    if isinstance(error, OpenRouterError):
        status_code = getattr(error, "status_code", None)
        details = f" (HTTP {status_code})" if status_code else ""
        return ClassifiedError(
            ErrorCategory.UPSTREAM_API, f"OpenRouter API error: {message}{details}"
        )

    if isinstance(error, InvalidCustomRulesError):
        return ClassifiedError(
            ErrorCategory.INVALID_CUSTOM_RULES,
            f"Invalid custom review rules in {error.file_path}: {message}",
        )

    if isinstance(error, ConfigurationError):
        return ClassifiedError(ErrorCategory.CONFIGURATION, f"Configuration error: {message}")

    if isinstance(error, PullRequestContextError):
        return ClassifiedError(
            ErrorCategory.CONTEXT,
            f"Action context error: {message}. This action must be run on pull requests.",
        )

    return None


def _classify_by_message(error: Exception) -> ClassifiedError:
    message = _describe(error)
    lowered = message.lower()
    for needles, category, template in _MESSAGE_RULES:
        if any(needle in lowered for needle in needles):
            return ClassifiedError(category, template.format(message=message))
    return ClassifiedError(ErrorCategory.UNEXPECTED, f"Unexpected error: {message}")


def classify_error(error: object) -> ClassifiedError:
    """Classify a caught failure value.

    Total over all inputs and never raises.

    Args:
        error: Exception instance or any other value that signalled failure

    Returns:
        Category plus the user-facing message for it
    """
    if not isinstance(error, Exception):
        return ClassifiedError(ErrorCategory.UNKNOWN, f"Unknown error occurred: {_describe(error)}")

    structured = _classify_structured(error)
    if structured is not None:
        return structured

    if isinstance(error, TypeError):
        return ClassifiedError(
            ErrorCategory.CONFIGURATION,
            f"Configuration error: {_describe(error)}. Please check your action inputs.",
        )

    if isinstance(error, InputRangeError):
        return ClassifiedError(
            ErrorCategory.INPUT_VALIDATION,
            f"Input validation error: {_describe(error)}. Please check your numeric inputs.",
        )

    return _classify_by_message(error)
