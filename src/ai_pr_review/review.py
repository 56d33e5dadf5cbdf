"""Generate a pull request review with an OpenRouter model.

Review standard (embedded in prompts):
- Favor approving when the change improves overall code health; no perfectionism.
- Prefix optional or style-only points with "Nit: ".
- Comment on the code, not the author; explain why when asking for a change.
"""

import logging
from collections.abc import Iterable
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath

import yaml

from ai_pr_review.errors import InvalidCustomRulesError
from ai_pr_review.llm.client import OpenRouterClient, OpenRouterConfig
from ai_pr_review.models.review import FileChange

logger = logging.getLogger(__name__)

# Overall cap on diff text sent to the model
MAX_DIFF_CHARS = 100_000

SYSTEM_PROMPT = """You are an experienced software engineer performing a code review of a pull request.

**Review standard:** Favor approving when the change improves overall code health, even if it isn't perfect. Do not block on minor polish. For optional or style-only points, prefix the remark with "Nit: " so the author knows it's optional. Comment on the code, not the author; be courteous and explain *why* when asking for a change.

**What to look for (in order of impact):** Design → Functionality (edge cases, concurrency, correct behavior) → Complexity → Tests → Naming, comments, style and consistency with existing code.

Respond in GitHub-flavored Markdown. Start with a short summary, then list concrete findings grouped by file with line references where possible. If the changes look good, say so briefly."""

REVIEW_FOCUS = {
    "comprehensive": "**Analyze from ALL perspectives**: security, performance, correctness and code quality.",
    "security": """**YOUR FOCUS: SECURITY**
Focus on injection vulnerabilities, authentication and authorization flaws, cryptographic issues, data exposure and trust boundary violations. Ignore style issues.""",
    "performance": """**YOUR FOCUS: PERFORMANCE & CORRECTNESS**
Focus on algorithmic complexity, resource management, unnecessary allocations or queries, race conditions and logic errors. Ignore style issues unless they cause bugs.""",
    "style": """**YOUR FOCUS: CODE QUALITY**
Focus on readability, naming, duplication, API design, error handling patterns and consistency with the surrounding code.""",
}

DEFAULT_REVIEW_TYPE = "comprehensive"


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    """Check a file path against glob-style exclude patterns.

    A pattern matches either the full path or the file name.
    """
    name = PurePosixPath(path).name
    return any(fnmatch(path, pattern) or fnmatch(name, pattern) for pattern in patterns)


def filter_files(files: Iterable[FileChange], exclude_patterns: Iterable[str]) -> list[FileChange]:
    """Drop excluded files and files without a patch (binary, renamed only)."""
    patterns = list(exclude_patterns)
    kept = []
    for file in files:
        if is_excluded(file.path, patterns):
            logger.debug(f"Excluding {file.path}")
            continue
        if not file.patch:
            logger.debug(f"Skipping {file.path}: no patch")
            continue
        kept.append(file)
    return kept


def load_custom_rules(path: str) -> list[str]:
    """Load custom review rules from a YAML file.

    The file holds either a list of rules or a mapping with a `rules` list.

    Raises:
        InvalidCustomRulesError: if the file is missing or malformed
    """
    rules_path = Path(path)
    if not rules_path.is_file():
        raise InvalidCustomRulesError(path, "file not found")

    try:
        with open(rules_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidCustomRulesError(path, f"invalid YAML: {e}") from e
    except UnicodeDecodeError as e:
        raise InvalidCustomRulesError(path, f"file is not valid UTF-8: {e}") from e
    except OSError as e:
        raise InvalidCustomRulesError(path, f"could not read file: {e}") from e

    if isinstance(raw, dict):
        raw = raw.get("rules")
    if not isinstance(raw, list):
        raise InvalidCustomRulesError(path, "expected a list of rules or a mapping with a `rules` list")
    if not all(isinstance(rule, str) and rule.strip() for rule in raw):
        raise InvalidCustomRulesError(path, "every rule must be a non-empty string")

    rules = [rule.strip() for rule in raw]
    logger.info(f"Loaded {len(rules)} custom review rules from {path}")
    return rules


def build_diff(files: Iterable[FileChange], max_chars: int = MAX_DIFF_CHARS) -> str:
    """Concatenate file patches into a unified diff, capped at max_chars."""
    diff_parts = []
    for file in files:
        diff_parts.append(f"diff --git a/{file.path} b/{file.path}")
        diff_parts.append(f"--- a/{file.path}")
        diff_parts.append(f"+++ b/{file.path}")
        diff_parts.append(file.patch)
        diff_parts.append("")

    diff = "\n".join(diff_parts)
    if len(diff) > max_chars:
        logger.info(f"Diff too long ({len(diff)} chars), truncating to {max_chars}")
        diff = diff[:max_chars] + "\n... [diff truncated]"
    return diff


def build_user_prompt(
    files: list[FileChange],
    pr_title: str,
    pr_body: str,
    review_type: str,
    custom_rules: list[str] | None = None,
) -> str:
    """Build the review request for the model."""
    focus = REVIEW_FOCUS.get(review_type.strip().lower())
    if focus is None:
        logger.debug(f"Unknown review type {review_type!r}, using {DEFAULT_REVIEW_TYPE}")
        focus = REVIEW_FOCUS[DEFAULT_REVIEW_TYPE]

    rules_section = ""
    if custom_rules:
        rules_section = "\n## Project Review Rules\n" + "\n".join(f"- {rule}" for rule in custom_rules) + "\n"

    file_list = "\n".join(f"- {f.path} (+{f.additions}/-{f.deletions})" for f in files)
    return f"""{focus}
{rules_section}
## Pull Request
**Title**: {pr_title or "Untitled"}

{pr_body or "No description provided."}

## Changed Files
{file_list}

## Code Changes (Diff)
```diff
{build_diff(files)}
```
"""


async def get_review(
    api_key: str,
    files: list[FileChange],
    model: str,
    max_tokens: int,
    temperature: float,
    timeout_ms: int | None,
    exclude_patterns: Iterable[str],
    pr_title: str,
    pr_body: str,
    review_type: str,
    retries: int,
    custom_rules_path: str | None = None,
) -> str | None:
    """Generate a review of the changed files.

    Returns:
        Review text, or None when nothing reviewable remains or the model
        returned no content

    Raises:
        InvalidCustomRulesError: if the custom rules file is unusable
        OpenRouterError: if the backend request fails
    """
    reviewable = filter_files(files, exclude_patterns)
    if not reviewable:
        logger.info("All changed files are excluded or have no patch; nothing to review")
        return None

    custom_rules = load_custom_rules(custom_rules_path) if custom_rules_path else None

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": build_user_prompt(reviewable, pr_title, pr_body, review_type, custom_rules),
        },
    ]

    logger.info(f"Requesting {review_type} review of {len(reviewable)} files from {model}")
    config = OpenRouterConfig(api_key=api_key, timeout_ms=timeout_ms, retries=retries)
    async with OpenRouterClient(config) as client:
        content = await client.complete(model, messages, max_tokens, temperature)

    if not isinstance(content, str) or not content.strip():
        return None
    return content.strip()
