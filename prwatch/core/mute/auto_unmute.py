from concurrent.futures import Executor, Future
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Sequence, Tuple

from prwatch.core.classification import is_real_user, is_self
from prwatch.core.exceptions import PRWatchError, describe_error
from prwatch.core.mute.manager import MuteManager
from prwatch.core.ports.github_source import GitHubSource
from prwatch.core.ports.logger import Logger
from prwatch.core.ports.preferences import Preferences
from prwatch.core.schema.items import ActivityRecord, PullRequest


@dataclass(frozen=True, slots=True)
class UnmutePolicy:
    humans_only: bool = True
    mentions_only: bool = True

    @classmethod
    def from_preferences(cls, preferences: Preferences) -> 'UnmutePolicy':
        return cls(
            humans_only=preferences.auto_unmute_humans_only(),
            mentions_only=preferences.auto_unmute_mentions_only(),
        )


def qualifies(
    record: ActivityRecord,
    muted_at: datetime,
    username: str,
    policy: UnmutePolicy,
) -> bool:
    if record.created_at is None or record.created_at <= muted_at:
        return False
    if not record.author or is_self(record.author, username):
        return False
    if policy.humans_only and not is_real_user(record.author, username):
        return False
    if policy.mentions_only and f"@{username}" not in record.body:
        return False
    return True


class AutoUnmuteReconciler:
    """Revives muted PRs that saw qualifying activity after they were muted.

    Only PRs whose ``updated_at`` is later than their mute time are checked.
    Comment and review fetches are submitted to the executor from the calling
    thread, which also does the unmuting once each check resolves.
    """

    def __init__(
        self,
        source: GitHubSource,
        mutes: MuteManager,
        executor: Executor,
        logger: Logger,
    ) -> None:
        self._source = source
        self._mutes = mutes
        self._executor = executor
        self._logger = logger

    def reconcile(
        self,
        open_prs: Sequence[PullRequest],
        username: str,
        policy: UnmutePolicy,
    ) -> List[str]:
        pending = []
        for pr in open_prs:
            muted_at = self._mutes.muted_at(pr.id)
            if muted_at is None or pr.updated_at <= muted_at:
                continue
            pending.append((pr, muted_at, self._submit_activity(pr)))

        unmuted: List[str] = []
        for pr, muted_at, fetches in pending:
            active = self._resolve_activity(pr, fetches, muted_at, username, policy)
            if active and self._mutes.unmute_if_unchanged(pr.id, muted_at):
                self._logger.info("Auto-unmuted pull request", pr_id=pr.id)
                unmuted.append(pr.id)
        return unmuted

    def has_qualifying_activity(
        self,
        pr: PullRequest,
        muted_at: datetime,
        username: str,
        policy: UnmutePolicy,
    ) -> bool:
        fetches = self._submit_activity(pr)
        return self._resolve_activity(pr, fetches, muted_at, username, policy)

    def _submit_activity(self, pr: PullRequest) -> Tuple[Future, Future]:
        submit = self._executor.submit
        return (
            submit(self._source.fetch_issue_comments, pr.repository, pr.number),
            submit(self._source.fetch_pr_reviews, pr.repository, pr.number),
        )

    def _resolve_activity(
        self,
        pr: PullRequest,
        fetches: Tuple[Future, Future],
        muted_at: datetime,
        username: str,
        policy: UnmutePolicy,
    ) -> bool:
        comments_future, reviews_future = fetches
        try:
            comments = comments_future.result()
            reviews = reviews_future.result()
        except PRWatchError as error:
            self._logger.warning(
                "Failed to check muted pull request for activity",
                pr_id=pr.id,
                error=describe_error(error),
            )
            return False
        return _first_qualifying(comments, reviews, muted_at, username, policy)


def _first_qualifying(
    comments: Iterable[ActivityRecord],
    reviews: Iterable[ActivityRecord],
    muted_at: datetime,
    username: str,
    policy: UnmutePolicy,
) -> bool:
    for record in comments:
        if qualifies(record, muted_at, username, policy):
            return True
    for record in reviews:
        if qualifies(record, muted_at, username, policy):
            return True
    return False
