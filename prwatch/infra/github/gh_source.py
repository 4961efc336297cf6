from datetime import datetime
from typing import List

from prwatch.core.exceptions import ParseError
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
from prwatch.infra.github.codec import (
    decode_activity,
    decode_issue,
    decode_lines,
    decode_list,
    decode_notification,
    decode_pr_details,
    decode_preview_files,
    decode_pull_request,
    decode_review_request,
    format_datetime,
)

OPEN_PR_FIELDS = "number,title,url,updatedAt,createdAt,isDraft,repository"
SETTLED_PR_FIELDS = "number,title,url,repository,updatedAt,closedAt"
REVIEW_REQUEST_FIELDS = "number,title,url,author,updatedAt,repository"
ISSUE_FIELDS = "number,title,url,commentsCount,updatedAt"
DETAIL_FIELDS = "mergeable,reviewDecision,statusCheckRollup,comments,reviews,reviewRequests"
PREVIEW_FIELDS = "additions,deletions,files,reviewRequests,latestReviews,createdAt,updatedAt"
SEARCH_LIMIT = "50"

NOTIFICATION_FILTER = (
    '.[] | select(.updated_at > "{since}") | '
    '{{reason, title: .subject.title, url: .subject.url, '
    'repo_url: .repository.html_url, updated_at: .updated_at}}'
)


class GhCliSource(GitHubSource):
    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def fetch_username(self) -> str:
        output = self._runner.run(["api", "user", "--jq", ".login"])
        username = output.decode("utf-8", errors="replace").strip()
        if not username:
            raise ParseError("Could not parse username")
        return username

    def fetch_open_prs(self) -> List[PullRequest]:
        payload = self._runner.run([
            "search", "prs",
            "--author", "@me",
            "--state", "open",
            "--json", OPEN_PR_FIELDS,
        ])
        return decode_list(payload, decode_pull_request)

    def fetch_merged_prs(self, since: datetime) -> List[PullRequest]:
        payload = self._runner.run([
            "search", "prs",
            "--author", "@me",
            "--merged",
            "--merged-at", f">={_day(since)}",
            "--json", SETTLED_PR_FIELDS,
            "--limit", SEARCH_LIMIT,
        ])
        return decode_list(payload, decode_pull_request)

    def fetch_closed_prs(self, since: datetime) -> List[PullRequest]:
        payload = self._runner.run([
            "search", "prs",
            "--author", "@me",
            "--state", "closed",
            "--closed", f">={_day(since)}",
            "--json", SETTLED_PR_FIELDS,
            "--limit", SEARCH_LIMIT,
        ])
        return decode_list(payload, decode_pull_request)

    def fetch_review_requests(self) -> List[ReviewRequest]:
        payload = self._runner.run([
            "search", "prs",
            "--review-requested", "@me",
            "--state", "open",
            "--json", REVIEW_REQUEST_FIELDS,
        ])
        return decode_list(payload, decode_review_request)

    def fetch_notifications(self, since: datetime) -> List[Notification]:
        jq_filter = NOTIFICATION_FILTER.format(since=format_datetime(since))
        payload = self._runner.run(["api", "notifications", "--jq", jq_filter])
        return decode_lines(payload, decode_notification)

    def fetch_issues(self, since: datetime) -> List[Issue]:
        payload = self._runner.run([
            "search", "issues",
            "--author", "@me",
            "--state", "open",
            "--json", ISSUE_FIELDS,
        ])
        issues = decode_list(payload, decode_issue)
        return [issue for issue in issues if issue.updated_at > since]

    def fetch_pr_details(self, pr: PullRequest) -> PRDetails:
        payload = self._runner.run([
            "pr", "view", str(pr.number),
            "--repo", pr.repository,
            "--json", DETAIL_FIELDS,
        ])
        return decode_pr_details(payload)

    def fetch_issue_comments(self, repository: str, number: int) -> List[ActivityRecord]:
        payload = self._runner.run(["api", f"repos/{repository}/issues/{number}/comments"])
        return decode_activity(payload, "created_at")

    def fetch_pr_reviews(self, repository: str, number: int) -> List[ActivityRecord]:
        payload = self._runner.run(["api", f"repos/{repository}/pulls/{number}/reviews"])
        return decode_activity(payload, "submitted_at")

    def fetch_preview_files(self, pr: PullRequest) -> PreviewFiles:
        payload = self._runner.run([
            "pr", "view", str(pr.number),
            "--repo", pr.repository,
            "--json", PREVIEW_FIELDS,
        ])
        return decode_preview_files(payload)


def _day(value: datetime) -> str:
    return format_datetime(value)[:10]
