"""Translation between ``gh`` JSON payloads and schema records.

Field names match the GitHub GraphQL (``gh search``/``gh pr view``) and REST
(``gh api``) payloads exactly. Required fields raise ``ParseError`` when
missing; optional ones fall back to ``None`` or their documented default.
"""
import json
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from prwatch.core.exceptions import ParseError
from prwatch.core.schema.items import (
    ActivityRecord,
    Issue,
    Notification,
    PRDetails,
    PullRequest,
    ReviewRequest,
    StatusCheck,
)
from prwatch.core.schema.preview import (
    ChangedFile,
    PreviewFiles,
    ReviewState,
    ReviewSummary,
)

T = TypeVar("T")


def parse_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ParseError(f"Expected ISO-8601 timestamp, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as error:
        raise ParseError(f"Invalid timestamp {value!r}") from error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_datetime(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def load_json(payload: bytes) -> Any:
    try:
        return json.loads(payload)
    except (ValueError, UnicodeDecodeError) as error:
        raise ParseError(f"Invalid JSON payload: {error}") from error


def decode_list(payload: bytes, decoder: Callable[[Mapping[str, Any]], T]) -> List[T]:
    if not payload.strip():
        return []
    data = load_json(payload)
    if not isinstance(data, list):
        raise ParseError(f"Expected a JSON array, got {type(data).__name__}")
    return [decoder(_as_mapping(item)) for item in data]


def decode_lines(payload: bytes, decoder: Callable[[Mapping[str, Any]], T]) -> List[T]:
    """Best-effort decode of newline-delimited JSON; bad lines are dropped."""
    records: List[T] = []
    for line in payload.splitlines():
        if not line.strip():
            continue
        try:
            records.append(decoder(_as_mapping(load_json(line))))
        except ParseError:
            continue
    return records


def decode_status_check(record: Mapping[str, Any]) -> StatusCheck:
    return StatusCheck(
        name=_optional_str(record, "name"),
        status=_optional_str(record, "status"),
        state=_optional_str(record, "state"),
        conclusion=_optional_str(record, "conclusion"),
        details_url=_optional_str(record, "detailsUrl"),
    )


def decode_pull_request(record: Mapping[str, Any]) -> PullRequest:
    closed_at = _optional_datetime(record, "closedAt")
    merged_at = _optional_datetime(record, "mergedAt") or closed_at
    return PullRequest(
        number=_required(record, "number", int),
        title=_required(record, "title", str),
        url=_required(record, "url", str),
        updated_at=parse_datetime(_required(record, "updatedAt", str)),
        repository=_repository_slug(record, required=True),
        created_at=_optional_datetime(record, "createdAt"),
        is_draft=bool(record.get("isDraft") or False),
        merged_at=merged_at,
        closed_at=closed_at,
        additions=_optional_int(record, "additions"),
        deletions=_optional_int(record, "deletions"),
    )


def encode_pull_request(pr: PullRequest) -> dict[str, Any]:
    record: dict[str, Any] = {
        "number": pr.number,
        "title": pr.title,
        "url": pr.url,
        "updatedAt": format_datetime(pr.updated_at),
        "isDraft": pr.is_draft,
        "repository": {"nameWithOwner": pr.repository},
    }
    if pr.created_at is not None:
        record["createdAt"] = format_datetime(pr.created_at)
    if pr.merged_at is not None:
        record["mergedAt"] = format_datetime(pr.merged_at)
    if pr.closed_at is not None:
        record["closedAt"] = format_datetime(pr.closed_at)
    if pr.additions is not None:
        record["additions"] = pr.additions
    if pr.deletions is not None:
        record["deletions"] = pr.deletions
    return record


def decode_review_request(record: Mapping[str, Any]) -> ReviewRequest:
    author = _as_mapping(_required(record, "author", dict))
    return ReviewRequest(
        number=_required(record, "number", int),
        title=_required(record, "title", str),
        url=_required(record, "url", str),
        updated_at=parse_datetime(_required(record, "updatedAt", str)),
        author=_required(author, "login", str),
        repository=_repository_slug(record, required=False),
    )


def encode_review_request(request: ReviewRequest) -> dict[str, Any]:
    record: dict[str, Any] = {
        "number": request.number,
        "title": request.title,
        "url": request.url,
        "updatedAt": format_datetime(request.updated_at),
        "author": {"login": request.author},
    }
    if request.repository is not None:
        record["repository"] = {"nameWithOwner": request.repository}
    return record


def decode_notification(record: Mapping[str, Any]) -> Notification:
    return Notification(
        reason=_required(record, "reason", str),
        title=_required(record, "title", str),
        updated_at=parse_datetime(_required(record, "updated_at", str)),
        url=_optional_str(record, "url"),
        repo_url=_optional_str(record, "repo_url"),
    )


def encode_notification(notification: Notification) -> dict[str, Any]:
    return {
        "reason": notification.reason,
        "title": notification.title,
        "url": notification.url,
        "repo_url": notification.repo_url,
        "updated_at": format_datetime(notification.updated_at),
    }


def decode_issue(record: Mapping[str, Any]) -> Issue:
    return Issue(
        number=_required(record, "number", int),
        title=_required(record, "title", str),
        url=_required(record, "url", str),
        comments_count=_optional_int(record, "commentsCount") or 0,
        updated_at=parse_datetime(_required(record, "updatedAt", str)),
    )


def encode_issue(issue: Issue) -> dict[str, Any]:
    return {
        "number": issue.number,
        "title": issue.title,
        "url": issue.url,
        "commentsCount": issue.comments_count,
        "updatedAt": format_datetime(issue.updated_at),
    }


def decode_pr_details(payload: bytes) -> PRDetails:
    data = _as_mapping(load_json(payload))
    checks_data = data.get("statusCheckRollup")
    checks = None
    if isinstance(checks_data, list):
        checks = tuple(decode_status_check(_as_mapping(check)) for check in checks_data)

    reviews = _list_of_mappings(data.get("reviews"))
    reviewer_logins = []
    for review in reviews:
        login = _nested_str(review, "author", "login")
        if login is not None:
            reviewer_logins.append(login)

    return PRDetails(
        mergeable=_optional_str(data, "mergeable"),
        review_decision=_optional_str(data, "reviewDecision"),
        status_checks=checks,
        comments_count=len(_list_of_mappings(data.get("comments"))),
        review_states=tuple(str(review.get("state") or "") for review in reviews),
        reviewer_logins=tuple(reviewer_logins),
        review_requests_count=len(_list_of_mappings(data.get("reviewRequests"))),
    )


def decode_activity(payload: bytes, time_key: str) -> List[ActivityRecord]:
    """Decode REST issue comments (``created_at``) or reviews (``submitted_at``)."""
    if not payload.strip():
        return []
    data = load_json(payload)
    if not isinstance(data, list):
        return []
    records: List[ActivityRecord] = []
    for item in _list_of_mappings(data):
        raw_time = item.get(time_key)
        records.append(
            ActivityRecord(
                author=_nested_str(item, "user", "login"),
                author_type=_nested_str(item, "user", "type"),
                body=item.get("body") or "",
                created_at=parse_datetime(raw_time) if raw_time else None,
                url=_optional_str(item, "html_url"),
            )
        )
    return records


def decode_preview_files(payload: bytes) -> PreviewFiles:
    try:
        data = _as_mapping(load_json(payload))
    except ParseError as error:
        raise ParseError("Failed to parse PR details") from error

    files = []
    for file in _list_of_mappings(data.get("files")):
        path = file.get("path")
        if not isinstance(path, str):
            continue
        files.append(
            ChangedFile(
                path=path,
                additions=_optional_int(file, "additions") or 0,
                deletions=_optional_int(file, "deletions") or 0,
            )
        )

    pending = []
    for request in _list_of_mappings(data.get("reviewRequests")):
        name = request.get("login") or request.get("name")
        if isinstance(name, str):
            pending.append(name)

    completed = []
    for review in _list_of_mappings(data.get("latestReviews")):
        login = _nested_str(review, "author", "login")
        state = review.get("state")
        if login is None or not isinstance(state, str):
            continue
        submitted = review.get("submittedAt")
        completed.append(
            ReviewSummary(
                author=login,
                state=ReviewState.parse(state),
                submitted_at=parse_datetime(submitted) if submitted else None,
            )
        )

    return PreviewFiles(
        additions=_optional_int(data, "additions") or 0,
        deletions=_optional_int(data, "deletions") or 0,
        files=tuple(files),
        pending_reviewers=tuple(pending),
        completed_reviews=tuple(completed),
        created_at=_optional_datetime(data, "createdAt"),
        updated_at=_optional_datetime(data, "updatedAt"),
    )


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ParseError(f"Expected a JSON object, got {type(value).__name__}")
    return value


def _list_of_mappings(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _required(record: Mapping[str, Any], key: str, kind: type) -> Any:
    value = record.get(key)
    if value is None:
        raise ParseError(f"Missing required field '{key}'")
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ParseError(f"Field '{key}' has unexpected type {type(value).__name__}")
    return value


def _optional_str(record: Mapping[str, Any], key: str) -> Optional[str]:
    value = record.get(key)
    return value if isinstance(value, str) else None


def _optional_int(record: Mapping[str, Any], key: str) -> Optional[int]:
    value = record.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _optional_datetime(record: Mapping[str, Any], key: str) -> Optional[datetime]:
    value = record.get(key)
    if not value:
        return None
    return parse_datetime(value)


def _nested_str(record: Mapping[str, Any], outer: str, inner: str) -> Optional[str]:
    container = record.get(outer)
    if not isinstance(container, Mapping):
        return None
    value = container.get(inner)
    return value if isinstance(value, str) else None


def _repository_slug(record: Mapping[str, Any], *, required: bool) -> Optional[str]:
    slug = _nested_str(record, "repository", "nameWithOwner")
    if slug is None and required:
        raise ParseError("Missing required field 'repository.nameWithOwner'")
    return slug
