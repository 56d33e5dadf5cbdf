"""Review pipeline models: collaborator records, outcomes and the execution report."""

from dataclasses import dataclass
from enum import Enum

from ai_pr_review.classifier import ClassifiedError, ErrorCategory


class ReviewStatus(Enum):
    """Value of the `review_status` output."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"


@dataclass(frozen=True)
class FileChange:
    """A file changed by the pull request."""

    path: str
    patch: str = ""
    status: str = "modified"
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class ExistingReview:
    """A review or comment already present on the pull request."""

    author: str | None
    body: str


@dataclass(frozen=True)
class ReviewSuccess:
    """A review was generated."""

    text: str


@dataclass(frozen=True)
class ReviewSkipped:
    """The run deliberately produced no review."""

    reason: str


@dataclass(frozen=True)
class ReviewFailure:
    """The run failed; carries the classified cause."""

    category: ErrorCategory
    message: str

    @classmethod
    def from_classified(cls, classified: ClassifiedError) -> "ReviewFailure":
        return cls(category=classified.category, message=classified.message)


ReviewOutcome = ReviewSuccess | ReviewSkipped | ReviewFailure


@dataclass(frozen=True)
class ExecutionReport:
    """Everything the process adapter needs to publish the result of a run."""

    outcome: ReviewOutcome
    comment_posted: bool = False

    @property
    def review_status(self) -> ReviewStatus:
        if isinstance(self.outcome, ReviewSuccess):
            return ReviewStatus.SUCCESS
        if isinstance(self.outcome, ReviewSkipped):
            return ReviewStatus.SKIPPED
        return ReviewStatus.FAILURE

    @property
    def review_comment(self) -> str:
        """Generated review text; empty on skip or failure."""
        if isinstance(self.outcome, ReviewSuccess):
            return self.outcome.text
        return ""

    @property
    def failure(self) -> ReviewFailure | None:
        return self.outcome if isinstance(self.outcome, ReviewFailure) else None

    @property
    def failed(self) -> bool:
        return self.failure is not None
