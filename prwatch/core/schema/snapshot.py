from dataclasses import dataclass
from datetime import datetime
from typing import AbstractSet, Optional, Tuple

from prwatch.core.schema.items import Issue, Notification, PullRequest, ReviewRequest


@dataclass(frozen=True, slots=True)
class Snapshot:
    open_prs: Tuple[PullRequest, ...] = ()
    merged_prs: Tuple[PullRequest, ...] = ()
    closed_prs: Tuple[PullRequest, ...] = ()
    review_requests: Tuple[ReviewRequest, ...] = ()
    notifications: Tuple[Notification, ...] = ()
    issues: Tuple[Issue, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None
    last_updated: Optional[datetime] = None
    username: Optional[str] = None

    def open_pr_ids(self) -> frozenset[str]:
        return frozenset(pr.id for pr in self.open_prs)

    def find_open_pr(self, pr_id: str) -> Optional[PullRequest]:
        for pr in self.open_prs:
            if pr.id == pr_id:
                return pr
        return None

    def attention_count(self, muted_ids: AbstractSet[str] = frozenset()) -> int:
        flagged = sum(
            1
            for pr in self.open_prs
            if pr.needs_attention and pr.id not in muted_ids
        )
        return flagged + len(self.review_requests)
