"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest

from ai_pr_review.models.context import PullRequestContext
from ai_pr_review.models.review import FileChange

SAMPLE_PATCH = """\
@@ -10,6 +10,12 @@ def authenticate(username: str, password: str) -> bool:
     hashed = hash_password(password)
     return db.verify_user(username, hashed)
+
+def get_user(username: str) -> dict:
+    \"\"\"Fetch user by username.\"\"\"
+    query = f"SELECT * FROM users WHERE username = '{username}'"
+    return db.execute(query)
"""


@pytest.fixture
def valid_inputs() -> dict[str, str]:
    """A complete, valid set of action inputs."""
    return {
        "github_token": "ghs_test",
        "openrouter_api_key": "sk-or-test",
        "model": "google/gemini-2.5-pro",
        "max_tokens": "4096",
        "temperature": "0.3",
        "retries": "3",
        "request_timeout_seconds": "120",
        "exclude_patterns": "*.lock, dist/*, ,",
        "review_type": "comprehensive",
        "custom_review_rules": "",
        "post_comment": "true",
    }


@pytest.fixture
def pr_context() -> PullRequestContext:
    """The pull request that triggered the run."""
    return PullRequestContext(
        owner="test-org",
        repo="test-repo",
        number=42,
        title="Add user lookup",
        body="This PR adds a user lookup helper.",
    )


@pytest.fixture
def changed_files() -> list[FileChange]:
    """Files changed by the sample pull request."""
    return [
        FileChange(path="auth/login.py", patch=SAMPLE_PATCH, additions=6, deletions=0),
        FileChange(path="poetry.lock", patch="@@ -1 +1 @@\n-a\n+b", additions=1, deletions=1),
    ]


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed UTC timestamp for comment footers."""
    return datetime(2025, 3, 14, 9, 5, tzinfo=timezone.utc)
