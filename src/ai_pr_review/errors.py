"""Structured failures raised by the review pipeline and its collaborators."""


class ReviewActionError(Exception):
    """Base class for failures raised intentionally by the action."""

    pass


class ConfigurationError(ReviewActionError):
    """Raised when a required input or secret is missing or unusable."""

    pass


class PullRequestContextError(ReviewActionError):
    """Raised when the triggering event carries no pull request."""

    pass


class InvalidCustomRulesError(ReviewActionError):
    """Raised when the custom review rules file cannot be used."""

    def __init__(self, file_path: str, message: str) -> None:
        super().__init__(message)
        self.file_path = file_path


class InputRangeError(ValueError):
    """Raised when a numeric input falls outside its documented range."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class OpenRouterError(ReviewActionError):
    """Base class for failures reported by the OpenRouter backend."""

    pass


class OpenRouterAuthError(OpenRouterError):
    """Raised when OpenRouter rejects the API key."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "OpenRouter authentication failed. Please check your OPENROUTER_API_KEY."
        )


class OpenRouterRateLimitError(OpenRouterError):
    """Raised when OpenRouter answers with HTTP 429."""

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class OpenRouterTimeoutError(OpenRouterError):
    """Raised when a request exceeds the configured timeout."""

    def __init__(self, timeout_ms: int | None, message: str | None = None) -> None:
        super().__init__(message or f"Request timed out after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class OpenRouterApiError(OpenRouterError):
    """Raised for any other OpenRouter API failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
