from typing import Iterable, Optional, Sequence, Tuple

from prwatch.core.classification import failing_checks
from prwatch.core.schema.items import ActivityRecord, PullRequest
from prwatch.core.schema.preview import (
    ChangedFile,
    MentionComment,
    PreviewDetails,
    PreviewFiles,
    WorkflowRun,
)

TOP_FILES_LIMIT = 5
MENTIONS_LIMIT = 3


def top_changed_files(
    files: Sequence[ChangedFile],
    limit: int = TOP_FILES_LIMIT,
) -> Tuple[ChangedFile, ...]:
    # sorted() is stable, so ties keep server order
    ranked = sorted(files, key=lambda file: file.total_changes, reverse=True)
    return tuple(ranked[:limit])


def recent_mentions(
    comments: Iterable[ActivityRecord],
    username: Optional[str],
    limit: int = MENTIONS_LIMIT,
) -> Tuple[MentionComment, ...]:
    if not username:
        return ()
    mention = f"@{username}"
    matching = [
        MentionComment(
            author=comment.author,
            body=comment.body,
            created_at=comment.created_at,
            url=comment.url,
        )
        for comment in comments
        if comment.author and comment.created_at and mention in comment.body
    ]
    return tuple(reversed(matching[-limit:]))


def failed_workflows(pr: PullRequest) -> Tuple[WorkflowRun, ...]:
    return tuple(
        WorkflowRun(
            name=check.name,
            conclusion=check.conclusion or check.state or "failure",
            url=check.details_url,
        )
        for check in failing_checks(pr.status_checks)
        if check.name
    )


def build_preview_details(
    pr: PullRequest,
    files: PreviewFiles,
    comments: Sequence[ActivityRecord],
    username: Optional[str],
) -> PreviewDetails:
    return PreviewDetails(
        pr_id=pr.id,
        pr_url=pr.url,
        additions=files.additions,
        deletions=files.deletions,
        changed_files_count=len(files.files),
        top_changed_files=top_changed_files(files.files),
        failed_workflows=failed_workflows(pr),
        pending_reviewers=files.pending_reviewers,
        completed_reviews=files.completed_reviews,
        recent_mentions=recent_mentions(comments, username),
        created_at=files.created_at,
        updated_at=files.updated_at,
    )
