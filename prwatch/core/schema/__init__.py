from prwatch.core.schema.items import (
    ActivityRecord,
    ExternalActivity,
    Issue,
    Notification,
    PRDetails,
    PullRequest,
    ReviewRequest,
    StatusCheck,
)
from prwatch.core.schema.preview import (
    ChangedFile,
    MentionComment,
    PreviewDetails,
    PreviewFiles,
    ReviewState,
    ReviewSummary,
    WorkflowRun,
)
from prwatch.core.schema.queue import QueueMessage
from prwatch.core.schema.snapshot import Snapshot

__all__ = [
    "ActivityRecord",
    "ChangedFile",
    "ExternalActivity",
    "Issue",
    "MentionComment",
    "Notification",
    "PRDetails",
    "PreviewDetails",
    "PreviewFiles",
    "PullRequest",
    "QueueMessage",
    "ReviewRequest",
    "ReviewState",
    "ReviewSummary",
    "Snapshot",
    "StatusCheck",
    "WorkflowRun",
]
