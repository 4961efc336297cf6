import threading
from concurrent.futures import Executor
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import List, Optional

from prwatch.core.classification import (
    filter_closed_against_merged,
    with_external_activity,
)
from prwatch.core.enrichment import PREnricher
from prwatch.core.exceptions import PRWatchError, QueueFullError, describe_error
from prwatch.core.jobs.base import BaseJob
from prwatch.core.mute import AutoUnmuteReconciler, MuteManager, UnmutePolicy
from prwatch.core.ports.clock import Clock
from prwatch.core.ports.github_source import GitHubSource
from prwatch.core.ports.logger import Logger
from prwatch.core.ports.preferences import Preferences
from prwatch.core.ports.queue import Queue
from prwatch.core.schema.items import Issue, Notification, PullRequest, ReviewRequest
from prwatch.core.schema.snapshot import Snapshot

DEFAULT_REFRESH_INTERVAL = 5 * 60.0


@dataclass(frozen=True, slots=True)
class _FetchResult:
    open_prs: List[PullRequest]
    merged_prs: List[PullRequest]
    closed_prs: List[PullRequest]
    review_requests: List[ReviewRequest]
    notifications: List[Notification]
    issues: List[Issue]


class RefreshJob(BaseJob):
    """Owns the snapshot and produces a new one each refresh cycle.

    A cycle fetches every list concurrently, enriches PRs, filters them,
    reconciles mutes against the new open set and then publishes. Only one
    cycle runs at a time; a refresh requested mid-cycle is rejected. A failed
    cycle keeps the previous collections and records the error.
    """

    def __init__(
        self,
        logger: Logger,
        source: GitHubSource,
        enricher: PREnricher,
        mutes: MuteManager,
        reconciler: AutoUnmuteReconciler,
        preferences: Preferences,
        clock: Clock,
        executor: Executor,
        output_queue: Optional[Queue[Snapshot]] = None,
    ) -> None:
        super().__init__(logger, poll_interval=DEFAULT_REFRESH_INTERVAL)
        self._source = source
        self._enricher = enricher
        self._mutes = mutes
        self._reconciler = reconciler
        self._preferences = preferences
        self._clock = clock
        self._executor = executor
        self._output_queue = output_queue
        self._snapshot = Snapshot()
        self._snapshot_lock = threading.Lock()
        self._cycle_lock = threading.Lock()
        self._username: Optional[str] = None

    @property
    def snapshot(self) -> Snapshot:
        with self._snapshot_lock:
            return self._snapshot

    def attention_count(self) -> int:
        return self.snapshot.attention_count(self._mutes.muted_ids())

    def poll_interval(self) -> float:
        return self._preferences.refresh_interval_minutes() * 60.0

    def setup(self) -> None:
        self._logger.info(
            "Refresh scheduling initialized",
            interval_seconds=self.current_interval(),
        )

    def execute_once(self) -> None:
        self.refresh()

    def teardown(self) -> None:
        return

    def refresh(self) -> bool:
        if not self._cycle_lock.acquire(blocking=False):
            self._logger.info("Refresh already in progress, request rejected")
            return False
        try:
            self._run_cycle()
        finally:
            self._cycle_lock.release()
        return True

    def _run_cycle(self) -> None:
        self._replace_snapshot(replace(self.snapshot, is_loading=True, error=None))
        try:
            username = self._resolve_username()
            fetched = self._fetch_all()
            open_prs, merged_prs = self._enricher.enrich_all(
                fetched.open_prs,
                fetched.merged_prs,
                username,
            )
        except PRWatchError as error:
            message = describe_error(error)
            self._logger.error("Refresh failed", error=message)
            self._replace_snapshot(
                replace(
                    self.snapshot,
                    is_loading=False,
                    error=message,
                    username=self._username,
                )
            )
            return

        snapshot = Snapshot(
            open_prs=tuple(open_prs),
            merged_prs=tuple(with_external_activity(merged_prs)),
            closed_prs=tuple(
                filter_closed_against_merged(fetched.closed_prs, fetched.merged_prs)
            ),
            review_requests=tuple(fetched.review_requests),
            notifications=tuple(fetched.notifications),
            issues=tuple(fetched.issues),
            is_loading=False,
            error=None,
            last_updated=self._clock.now(),
            username=username,
        )
        self._reconcile_mutes(snapshot)
        self._replace_snapshot(snapshot)
        self._publish(snapshot)
        self._logger.info(
            "Refresh complete",
            open_prs=len(snapshot.open_prs),
            merged_prs=len(snapshot.merged_prs),
            closed_prs=len(snapshot.closed_prs),
            review_requests=len(snapshot.review_requests),
            notifications=len(snapshot.notifications),
            issues=len(snapshot.issues),
        )

    def _resolve_username(self) -> str:
        if self._username is None:
            self._username = self._source.fetch_username()
            self._logger.info("Resolved GitHub username", username=self._username)
        return self._username

    def _fetch_all(self) -> _FetchResult:
        now = self._clock.now()
        merged_since = now - timedelta(days=self._preferences.merged_days())
        recent_since = now - timedelta(hours=self._preferences.notification_hours())

        submit = self._executor.submit
        open_prs = submit(self._source.fetch_open_prs)
        merged_prs = submit(self._source.fetch_merged_prs, merged_since)
        closed_prs = submit(self._source.fetch_closed_prs, merged_since)
        review_requests = submit(self._source.fetch_review_requests)
        notifications = submit(self._source.fetch_notifications, recent_since)
        issues = submit(self._source.fetch_issues, recent_since)

        return _FetchResult(
            open_prs=open_prs.result(),
            merged_prs=merged_prs.result(),
            closed_prs=closed_prs.result(),
            review_requests=review_requests.result(),
            notifications=notifications.result(),
            issues=issues.result(),
        )

    def _reconcile_mutes(self, snapshot: Snapshot) -> None:
        try:
            self._mutes.unmute_closed(snapshot.open_pr_ids())
            if self._preferences.auto_unmute_enabled() and snapshot.username:
                self._reconciler.reconcile(
                    snapshot.open_prs,
                    snapshot.username,
                    UnmutePolicy.from_preferences(self._preferences),
                )
        except PRWatchError as error:
            self._logger.error(
                "Mute reconciliation failed",
                error=describe_error(error),
            )

    def _publish(self, snapshot: Snapshot) -> None:
        if self._output_queue is None:
            return
        try:
            self._output_queue.put(snapshot)
        except QueueFullError:
            self._logger.warning(
                "Snapshot queue full, alerts skipped for this cycle",
                queued=self._output_queue.size(),
            )

    def _replace_snapshot(self, snapshot: Snapshot) -> None:
        with self._snapshot_lock:
            self._snapshot = snapshot
