"""Input loading and validation for the AI PR Review action."""

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from ai_pr_review.errors import ConfigurationError, InputRangeError

logger = logging.getLogger(__name__)

# Defaults used when an input is absent or blank
INPUT_DEFAULTS: dict[str, str] = {
    "model": "google/gemini-2.5-pro",
    "max_tokens": "4096",
    "temperature": "0.3",
    "retries": "3",
    "request_timeout_seconds": "120",
    "exclude_patterns": "",
    "review_type": "comprehensive",
    "custom_review_rules": "",
    "post_comment": "true",
}

SECRET_INPUTS = ("github_token", "openrouter_api_key")

INPUT_NAMES = (*SECRET_INPUTS, *INPUT_DEFAULTS)

MAX_TOKENS_RANGE = (1, 32768)
TEMPERATURE_RANGE = (0.0, 2.0)
RETRIES_RANGE = (0, 5)
REQUEST_TIMEOUT_RANGE = (1, 600)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class Configuration:
    """Validated run parameters."""

    model: str
    max_tokens: int
    temperature: float
    retries: int
    request_timeout_seconds: int | None
    exclude_patterns: frozenset[str] = field(default_factory=frozenset)
    review_type: str = "comprehensive"
    custom_rules_path: str | None = None
    post_comment: bool = True

    @property
    def timeout_ms(self) -> int | None:
        """Per-request timeout in milliseconds, or None to use the client default."""
        if self.request_timeout_seconds is None:
            return None
        return self.request_timeout_seconds * 1000


@dataclass(frozen=True)
class Secrets:
    """Credentials required before any network call."""

    github_token: str = field(repr=False)
    openrouter_api_key: str = field(repr=False)


def input_env_name(name: str) -> str:
    """Environment variable that carries an action input."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def read_inputs(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect the action inputs from the environment.

    Args:
        environ: Environment to read (default: os.environ)

    Returns:
        Flat mapping of input name to trimmed string value, defaults applied
    """
    if environ is None:
        environ = os.environ

    inputs: dict[str, str] = {}
    for name in INPUT_NAMES:
        value = environ.get(input_env_name(name), "").strip()
        if not value:
            value = INPUT_DEFAULTS.get(name, "")
        inputs[name] = value
    return inputs


def parse_int(raw: str | None) -> int | None:
    """Parse the leading integer of a string, or None if there is none."""
    match = _INT_PREFIX.match(raw or "")
    return int(match.group(1)) if match else None


def parse_float(raw: str | None) -> float | None:
    """Parse the leading decimal number of a string, or None if there is none."""
    match = _FLOAT_PREFIX.match(raw or "")
    return float(match.group(1)) if match else None


def validate_inputs(inputs: Mapping[str, str]) -> None:
    """Bounds-check the numeric inputs.

    Checks run in a fixed order and stop at the first violation.

    Raises:
        InputRangeError: naming the offending input and its valid range
    """
    low, high = MAX_TOKENS_RANGE
    max_tokens = parse_int(inputs.get("max_tokens"))
    if max_tokens is None or not low <= max_tokens <= high:
        raise InputRangeError(
            "max_tokens",
            f"`max_tokens` must be a positive integer between {low} and {high}",
        )

    low_f, high_f = TEMPERATURE_RANGE
    temperature = parse_float(inputs.get("temperature"))
    if temperature is None or not low_f <= temperature <= high_f:
        raise InputRangeError("temperature", "`temperature` must be a number between 0 and 2")

    low, high = RETRIES_RANGE
    retries = parse_int(inputs.get("retries"))
    if retries is None or not low <= retries <= high:
        raise InputRangeError(
            "retries",
            f"`retries` must be a non-negative integer between {low} and {high}",
        )

    # An unparseable timeout is tolerated; the client falls back to its default
    low, high = REQUEST_TIMEOUT_RANGE
    timeout = parse_int(inputs.get("request_timeout_seconds"))
    if timeout is not None and not low <= timeout <= high:
        raise InputRangeError(
            "request_timeout_seconds",
            f"`request_timeout_seconds` must be between {low} and {high} seconds",
        )


def parse_exclude_patterns(raw: str | None) -> frozenset[str]:
    """Split a comma-separated pattern list, dropping empty entries."""
    return frozenset(p.strip() for p in (raw or "").split(",") if p.strip())


def parse_configuration(inputs: Mapping[str, str]) -> Configuration:
    """Validate the inputs and build an immutable Configuration.

    Args:
        inputs: Flat mapping of input names to raw string values

    Returns:
        Validated configuration

    Raises:
        InputRangeError: if a numeric input is out of range
    """
    validate_inputs(inputs)

    custom_rules = (inputs.get("custom_review_rules") or "").strip()
    config = Configuration(
        model=(inputs.get("model") or INPUT_DEFAULTS["model"]).strip(),
        max_tokens=parse_int(inputs.get("max_tokens")),
        temperature=parse_float(inputs.get("temperature")),
        retries=parse_int(inputs.get("retries")),
        request_timeout_seconds=parse_int(inputs.get("request_timeout_seconds")),
        exclude_patterns=parse_exclude_patterns(inputs.get("exclude_patterns")),
        review_type=inputs.get("review_type") or INPUT_DEFAULTS["review_type"],
        custom_rules_path=custom_rules or None,
        post_comment=(inputs.get("post_comment") or "").strip().lower() == "true",
    )
    logger.debug(f"Parsed configuration: {config}")
    return config


def require_secrets(inputs: Mapping[str, str]) -> Secrets:
    """Fetch the required secrets.

    Raises:
        ConfigurationError: if a secret is missing or blank
    """
    values = {}
    for name in SECRET_INPUTS:
        value = (inputs.get(name) or "").strip()
        if not value:
            raise ConfigurationError(f"Input required and not supplied: {name}")
        values[name] = value
    return Secrets(**values)
