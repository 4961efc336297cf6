from datetime import datetime
from typing import List, Protocol, runtime_checkable

from prwatch.core.schema.items import (
    ActivityRecord,
    Issue,
    Notification,
    PRDetails,
    PullRequest,
    ReviewRequest,
)
from prwatch.core.schema.preview import PreviewFiles


@runtime_checkable
class GitHubSource(Protocol):
    def fetch_username(self) -> str: ...

    def fetch_open_prs(self) -> List[PullRequest]: ...

    def fetch_merged_prs(self, since: datetime) -> List[PullRequest]: ...

    def fetch_closed_prs(self, since: datetime) -> List[PullRequest]: ...

    def fetch_review_requests(self) -> List[ReviewRequest]: ...

    def fetch_notifications(self, since: datetime) -> List[Notification]: ...

    def fetch_issues(self, since: datetime) -> List[Issue]: ...

    def fetch_pr_details(self, pr: PullRequest) -> PRDetails: ...

    def fetch_issue_comments(self, repository: str, number: int) -> List[ActivityRecord]: ...

    def fetch_pr_reviews(self, repository: str, number: int) -> List[ActivityRecord]: ...

    def fetch_preview_files(self, pr: PullRequest) -> PreviewFiles: ...
