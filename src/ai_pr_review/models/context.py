"""Pull request context models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PullRequestContext:
    """The pull request that triggered the run."""

    owner: str
    repo: str
    number: int
    title: str = ""
    body: str = ""

    @property
    def full_name(self) -> str:
        """Repository in "owner/name" format."""
        return f"{self.owner}/{self.repo}"
