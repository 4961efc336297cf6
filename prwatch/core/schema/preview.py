from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class ReviewState(Enum):
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    COMMENTED = "COMMENTED"
    PENDING = "PENDING"
    DISMISSED = "DISMISSED"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'ReviewState':
        try:
            return cls(value)
        except ValueError:
            return cls.COMMENTED


@dataclass(frozen=True, slots=True)
class ChangedFile:
    path: str
    additions: int
    deletions: int

    @property
    def total_changes(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True, slots=True)
class ReviewSummary:
    author: str
    state: ReviewState
    submitted_at: Optional[datetime]


@dataclass(frozen=True, slots=True)
class WorkflowRun:
    name: str
    conclusion: str
    url: Optional[str]


@dataclass(frozen=True, slots=True)
class MentionComment:
    author: str
    body: str
    created_at: datetime
    url: Optional[str]


@dataclass(frozen=True, slots=True)
class PreviewFiles:
    """Result of the file/review/metadata half of a preview fetch."""

    additions: int
    deletions: int
    files: Tuple[ChangedFile, ...]
    pending_reviewers: Tuple[str, ...]
    completed_reviews: Tuple[ReviewSummary, ...]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


@dataclass(frozen=True, slots=True)
class PreviewDetails:
    pr_id: str
    pr_url: str
    additions: int
    deletions: int
    changed_files_count: int
    top_changed_files: Tuple[ChangedFile, ...]
    failed_workflows: Tuple[WorkflowRun, ...]
    pending_reviewers: Tuple[str, ...]
    completed_reviews: Tuple[ReviewSummary, ...]
    recent_mentions: Tuple[MentionComment, ...]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
