from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class ExternalActivity(Enum):
    UNKNOWN = "unknown"
    YES = "yes"
    NO = "no"


@dataclass(frozen=True, slots=True)
class StatusCheck:
    name: Optional[str] = None
    status: Optional[str] = None
    state: Optional[str] = None
    conclusion: Optional[str] = None
    details_url: Optional[str] = None

    def has_outcome(self, outcome: str) -> bool:
        return self.conclusion == outcome or self.state == outcome


@dataclass(frozen=True, slots=True)
class PullRequest:
    number: int
    title: str
    url: str
    updated_at: datetime
    repository: str
    created_at: Optional[datetime] = None
    is_draft: bool = False

    mergeable: Optional[str] = None
    review_decision: Optional[str] = None
    status_checks: Optional[Tuple[StatusCheck, ...]] = None
    needs_attention: Optional[bool] = None
    attention_reasons: Optional[Tuple[str, ...]] = None
    comments_count: Optional[int] = None
    approvals_count: Optional[int] = None
    reviewers_count: Optional[int] = None
    failing_check: Optional[str] = None

    merged_at: Optional[datetime] = None
    additions: Optional[int] = None
    deletions: Optional[int] = None
    external_activity: ExternalActivity = ExternalActivity.UNKNOWN

    closed_at: Optional[datetime] = None

    @property
    def id(self) -> str:
        return f"{self.repository}#{self.number}"


@dataclass(frozen=True, slots=True)
class ReviewRequest:
    number: int
    title: str
    url: str
    updated_at: datetime
    author: str
    repository: Optional[str] = None

    @property
    def id(self) -> str:
        return f"{self.repository or 'unknown'}#{self.number}"


@dataclass(frozen=True, slots=True)
class Notification:
    reason: str
    title: str
    updated_at: datetime
    url: Optional[str] = None
    repo_url: Optional[str] = None

    @property
    def id(self) -> str:
        return f"{self.reason}-{self.title}-{self.updated_at.timestamp()}"


@dataclass(frozen=True, slots=True)
class Issue:
    number: int
    title: str
    url: str
    comments_count: int
    updated_at: datetime

    @property
    def id(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class ActivityRecord:
    """A raw issue comment or pull request review as the REST API reports it.

    ``created_at`` holds ``created_at`` for comments and ``submitted_at`` for
    reviews; either may be missing on pending reviews.
    """

    author: Optional[str]
    author_type: Optional[str]
    body: str
    created_at: Optional[datetime]
    url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PRDetails:
    """Secondary fields returned by ``gh pr view`` for enrichment."""

    mergeable: Optional[str]
    review_decision: Optional[str]
    status_checks: Optional[Tuple[StatusCheck, ...]]
    comments_count: int
    review_states: Tuple[str, ...]
    reviewer_logins: Tuple[str, ...]
    review_requests_count: int
