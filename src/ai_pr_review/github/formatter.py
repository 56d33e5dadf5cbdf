"""Format a generated review as a bounded-length PR comment."""

import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

# Prefix of every comment header; also marks a PR as already reviewed
AI_REVIEW_MARKER = "## 🤖 AI Review by"

# GitHub caps comments at 65536 characters
MAX_COMMENT_LENGTH = 60000

# Slack kept free when truncating
TRUNCATION_MARGIN = 100

TRUNCATION_NOTICE = (
    "\n\n**[Review truncated due to length limits. See full review in action logs.]**"
)

# Longest model id shown in header and footer
MAX_MODEL_LABEL = 100


def model_display_name(model: str) -> str:
    """Human-readable model name, e.g. "google/gemini-2.5-pro" -> "Gemini 2.5 pro"."""
    name = model.rsplit("/", 1)[-1]
    return (name[:1].upper() + name[1:]).replace("-", " ")


def format_header(model: str) -> str:
    return f"{AI_REVIEW_MARKER} {model_display_name(model)}\n\n"


def format_footer(model: str, now: datetime) -> str:
    now = now.astimezone(timezone.utc)
    return (
        f"\n\n---\n*This review was automatically generated by `{model}` via OpenRouter "
        f"on {now:%Y-%m-%d} at {now:%H:%M} UTC. "
        "Please consider it as supplementary feedback alongside human review.*"
    )


def truncate_body(
    header: str,
    body: str,
    footer: str,
    max_length: int = MAX_COMMENT_LENGTH,
) -> str:
    """Shorten the body so header + body + footer fits in max_length.

    A truncated body always ends with TRUNCATION_NOTICE.
    """
    total = len(header) + len(body) + len(footer)
    if total <= max_length:
        return body

    available = max_length - len(header) - len(footer) - TRUNCATION_MARGIN
    keep = max(0, available - len(TRUNCATION_NOTICE))
    logger.info(
        f"Review content too long ({total} chars). Truncating to fit within {max_length} chars."
    )
    return body[:keep] + TRUNCATION_NOTICE


def format_review_comment(
    model: str,
    review: str,
    now: datetime | None = None,
    max_length: int = MAX_COMMENT_LENGTH,
) -> str:
    """Build the PR comment for a review.

    Args:
        model: Model identifier, optionally "provider/name"; only the first
            MAX_MODEL_LABEL characters are shown
        review: Raw review text
        now: Timestamp shown in the footer (default: current UTC time)
        max_length: Comment length budget

    Returns:
        Header, body and footer joined; never longer than max_length
    """
    if now is None:
        now = datetime.now(timezone.utc)

    label = model[:MAX_MODEL_LABEL]
    header = format_header(label)
    footer = format_footer(label, now)
    body = truncate_body(header, review, footer, max_length)
    comment = f"{header}{body}{footer}"
    if len(comment) > max_length:
        logger.warning(f"Comment still exceeds {max_length} chars after truncation; cutting it short")
        comment = comment[:max_length]
    return comment
