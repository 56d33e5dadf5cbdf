"""GitHub API client for the pull request operations the action needs."""

import logging

from github import Auth, Github
from github.PullRequest import PullRequest

from ai_pr_review.github.formatter import AI_REVIEW_MARKER
from ai_pr_review.models.review import ExistingReview, FileChange

logger = logging.getLogger(__name__)

# Identity the workflow posts as when using the default GITHUB_TOKEN
AUTOMATION_LOGIN = "github-actions[bot]"


def is_existing_ai_review(review: ExistingReview, login: str = AUTOMATION_LOGIN) -> bool:
    """Check whether a review was left by a previous run of this action.

    Any model's header counts, so a PR is only ever reviewed once.
    """
    return review.author == login and AI_REVIEW_MARKER in (review.body or "")


class GitHubClient:
    """Client for GitHub API operations."""

    def __init__(self, token: str, base_url: str | None = None) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub token (usually the workflow's GITHUB_TOKEN)
            base_url: Optional base URL for GitHub Enterprise
        """
        auth = Auth.Token(token)
        if base_url:
            self._gh = Github(auth=auth, base_url=base_url)
        else:
            self._gh = Github(auth=auth)

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequest:
        """Get a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            PullRequest object
        """
        return self._gh.get_repo(f"{owner}/{repo}").get_pull(pr_number)

    def list_changed_files(self, owner: str, repo: str, pr_number: int) -> list[FileChange]:
        """List the files changed by a pull request, with their patches."""
        pr = self.get_pull_request(owner, repo, pr_number)
        return [
            FileChange(
                path=file.filename,
                patch=file.patch or "",
                status=file.status,
                additions=file.additions,
                deletions=file.deletions,
            )
            for file in pr.get_files()
        ]

    def list_reviews(self, owner: str, repo: str, pr_number: int) -> list[ExistingReview]:
        """List the reviews and conversation comments already on a pull request.

        The action posts its review as a conversation comment, so both
        are returned for the idempotency check.
        """
        pr = self.get_pull_request(owner, repo, pr_number)
        reviews = [
            ExistingReview(author=review.user.login if review.user else None, body=review.body or "")
            for review in pr.get_reviews()
        ]
        reviews.extend(
            ExistingReview(author=comment.user.login if comment.user else None, body=comment.body or "")
            for comment in pr.get_issue_comments()
        )
        logger.debug(f"Found {len(reviews)} existing reviews and comments on PR #{pr_number}")
        return reviews

    def post_comment(self, owner: str, repo: str, issue_number: int, body: str) -> None:
        """Post a conversation comment on a pull request."""
        self._gh.get_repo(f"{owner}/{repo}").get_issue(issue_number).create_comment(body)
        logger.info(f"Posted comment on PR #{issue_number}")
