import threading
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from prwatch.core.exceptions import PRWatchError
from prwatch.core.ports.command_runner import CommandRunner
from prwatch.core.ports.github_source import GitHubSource
from prwatch.core.schema.items import (
    ActivityRecord,
    Issue,
    Notification,
    PRDetails,
    PullRequest,
    ReviewRequest,
)
from prwatch.core.schema.preview import PreviewFiles


class FakeCommandRunner(CommandRunner):
    """Replies to gh invocations from a table keyed by the argument tuple."""

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], bytes | Exception]] = None) -> None:
        self._responses = dict(responses or {})
        self.calls: list[Tuple[str, ...]] = []

    def respond(self, args: Sequence[str], response: bytes | Exception) -> None:
        self._responses[tuple(args)] = response

    def run(self, args: Sequence[str]) -> bytes:
        key = tuple(args)
        self.calls.append(key)
        if key not in self._responses:
            raise AssertionError(f"Unexpected gh call: {key}")
        response = self._responses[key]
        if isinstance(response, Exception):
            raise response
        return response


class FakeGitHubSource(GitHubSource):
    def __init__(
        self,
        *,
        username: str = "octocat",
        open_prs: Sequence[PullRequest] = (),
        merged_prs: Sequence[PullRequest] = (),
        closed_prs: Sequence[PullRequest] = (),
        review_requests: Sequence[ReviewRequest] = (),
        notifications: Sequence[Notification] = (),
        issues: Sequence[Issue] = (),
    ) -> None:
        self.username = username
        self.open_prs = list(open_prs)
        self.merged_prs = list(merged_prs)
        self.closed_prs = list(closed_prs)
        self.review_requests = list(review_requests)
        self.notifications = list(notifications)
        self.issues = list(issues)
        self.details: Dict[str, PRDetails] = {}
        self.comments: Dict[Tuple[str, int], List[ActivityRecord]] = {}
        self.reviews: Dict[Tuple[str, int], List[ActivityRecord]] = {}
        self.preview_files: Dict[str, PreviewFiles] = {}
        self.failures: Dict[str, PRWatchError] = {}
        self.item_failures: Dict[object, PRWatchError] = {}
        self.calls: list[Tuple[str, object]] = []

    def fail(self, operation: str, error: PRWatchError) -> None:
        self.failures[operation] = error

    def fetch_username(self) -> str:
        self._record("fetch_username", None)
        return self.username

    def fetch_open_prs(self) -> List[PullRequest]:
        self._record("fetch_open_prs", None)
        return list(self.open_prs)

    def fetch_merged_prs(self, since: datetime) -> List[PullRequest]:
        self._record("fetch_merged_prs", since)
        return list(self.merged_prs)

    def fetch_closed_prs(self, since: datetime) -> List[PullRequest]:
        self._record("fetch_closed_prs", since)
        return list(self.closed_prs)

    def fetch_review_requests(self) -> List[ReviewRequest]:
        self._record("fetch_review_requests", None)
        return list(self.review_requests)

    def fetch_notifications(self, since: datetime) -> List[Notification]:
        self._record("fetch_notifications", since)
        return list(self.notifications)

    def fetch_issues(self, since: datetime) -> List[Issue]:
        self._record("fetch_issues", since)
        return list(self.issues)

    def fetch_pr_details(self, pr: PullRequest) -> PRDetails:
        self._record("fetch_pr_details", pr.id)
        self._fail_item(pr.id)
        return self.details[pr.id]

    def fetch_issue_comments(self, repository: str, number: int) -> List[ActivityRecord]:
        self._record("fetch_issue_comments", (repository, number))
        self._fail_item((repository, number))
        return list(self.comments.get((repository, number), []))

    def fetch_pr_reviews(self, repository: str, number: int) -> List[ActivityRecord]:
        self._record("fetch_pr_reviews", (repository, number))
        return list(self.reviews.get((repository, number), []))

    def fetch_preview_files(self, pr: PullRequest) -> PreviewFiles:
        self._record("fetch_preview_files", pr.id)
        self._fail_item(pr.id)
        return self.preview_files[pr.id]

    def calls_to(self, operation: str) -> list[object]:
        return [argument for name, argument in self.calls if name == operation]

    def _fail_item(self, key: object) -> None:
        if key in self.item_failures:
            raise self.item_failures[key]

    def _record(self, operation: str, argument: object) -> None:
        self.calls.append((operation, argument))
        if operation in self.failures:
            raise self.failures[operation]


class OverlapTrackingSource(FakeGitHubSource):
    """Records whether the comment and review fetches for a PR ran together."""

    def __init__(self, wait_timeout: float = 2.0, **kwargs) -> None:
        super().__init__(**kwargs)
        self._wait_timeout = wait_timeout
        self._comments_started = threading.Event()
        self._reviews_started = threading.Event()
        self._comments_saw_reviews = False
        self._reviews_saw_comments = False

    @property
    def overlapped(self) -> bool:
        return self._comments_saw_reviews and self._reviews_saw_comments

    def fetch_issue_comments(self, repository: str, number: int) -> List[ActivityRecord]:
        self._comments_started.set()
        self._comments_saw_reviews = self._reviews_started.wait(self._wait_timeout)
        return super().fetch_issue_comments(repository, number)

    def fetch_pr_reviews(self, repository: str, number: int) -> List[ActivityRecord]:
        self._reviews_started.set()
        self._reviews_saw_comments = self._comments_started.wait(self._wait_timeout)
        return super().fetch_pr_reviews(repository, number)
