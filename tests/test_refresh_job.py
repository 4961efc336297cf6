from datetime import timedelta

from prwatch.core.enrichment import PREnricher
from prwatch.core.exceptions import AUTH_REQUIRED_MESSAGE, StateError, ToolExecutionError
from prwatch.core.jobs import RefreshJob
from prwatch.core.jobs.refresh import DEFAULT_REFRESH_INTERVAL
from prwatch.core.mute import AutoUnmuteReconciler, MuteManager
from prwatch.core.schema.items import ExternalActivity
from prwatch.core.schema.snapshot import Snapshot
from tests.builders import (
    BASE_TIME,
    at,
    check,
    comment,
    make_details,
    make_notification,
    make_pr,
    make_review_request,
)
from prwatch.infra.state import PreferencesStore
from tests.fakes import (
    FakeClock,
    FakeGitHubSource,
    FakeLogger,
    FakeMuteState,
    FakePreferences,
    FakeQueue,
    FakeStateStore,
    InlineExecutor,
)


def _build_job(
    source: FakeGitHubSource,
    *,
    preferences=None,
    mute_state: FakeMuteState | None = None,
    logger: FakeLogger | None = None,
):
    logger = logger or FakeLogger()
    clock = FakeClock(BASE_TIME)
    executor = InlineExecutor()
    mutes = MuteManager(mute_state or FakeMuteState(), clock, logger)
    queue = FakeQueue[Snapshot](clock)
    job = RefreshJob(
        logger=logger,
        source=source,
        enricher=PREnricher(source, executor, logger),
        mutes=mutes,
        reconciler=AutoUnmuteReconciler(source, mutes, executor, logger),
        preferences=preferences or FakePreferences(),
        clock=clock,
        executor=executor,
        output_queue=queue,
    )
    return job, mutes, queue


def _populated_source() -> FakeGitHubSource:
    open_pr = make_pr(1)
    quiet_merged = make_pr(2, merged_at=at(-2))
    discussed_merged = make_pr(3, merged_at=at(-1))
    source = FakeGitHubSource(
        open_prs=[open_pr],
        merged_prs=[quiet_merged, discussed_merged],
        closed_prs=[make_pr(2, closed_at=at(-2)), make_pr(4, closed_at=at(-3))],
        review_requests=[make_review_request(7, "acme/api")],
        notifications=[make_notification("mention", "Ping")],
    )
    source.details[open_pr.id] = make_details(checks=[check("tests", "FAILURE")])
    source.comments[("acme/widgets", 3)] = [comment("jane", "nice")]
    return source


class TestRefreshCycle:
    def test_builds_and_publishes_snapshot(self) -> None:
        job, _, queue = _build_job(_populated_source())

        assert job.refresh() is True

        snapshot = job.snapshot
        assert snapshot.username == "octocat"
        assert snapshot.last_updated == BASE_TIME
        assert snapshot.is_loading is False
        assert snapshot.error is None
        assert [pr.number for pr in snapshot.open_prs] == [1]
        assert snapshot.open_prs[0].attention_reasons == ("ci_failure",)
        assert [pr.number for pr in snapshot.merged_prs] == [3]
        assert snapshot.merged_prs[0].external_activity is ExternalActivity.YES
        assert [pr.number for pr in snapshot.closed_prs] == [4]
        assert [request.id for request in snapshot.review_requests] == ["acme/api#7"]
        assert queue.payloads() == [snapshot]

    def test_closed_filter_uses_merged_results_before_activity_filter(self) -> None:
        job, _, _ = _build_job(_populated_source())

        job.refresh()

        # PR 2 is merged without outside activity, so it is hidden from both lists
        assert 2 not in [pr.number for pr in job.snapshot.merged_prs]
        assert 2 not in [pr.number for pr in job.snapshot.closed_prs]

    def test_windows_come_from_preferences(self) -> None:
        source = FakeGitHubSource()
        preferences = FakePreferences(merged_days=7, notification_hours=6)
        job, _, _ = _build_job(source, preferences=preferences)

        job.refresh()

        assert source.calls_to("fetch_merged_prs") == [BASE_TIME - timedelta(days=7)]
        assert source.calls_to("fetch_closed_prs") == [BASE_TIME - timedelta(days=7)]
        assert source.calls_to("fetch_notifications") == [BASE_TIME - timedelta(hours=6)]
        assert source.calls_to("fetch_issues") == [BASE_TIME - timedelta(hours=6)]

    def test_username_is_resolved_once(self) -> None:
        source = FakeGitHubSource()
        job, _, _ = _build_job(source)

        job.refresh()
        job.refresh()

        assert len(source.calls_to("fetch_username")) == 1
        assert len(source.calls_to("fetch_open_prs")) == 2

    def test_poll_interval_tracks_preferences(self) -> None:
        preferences = FakePreferences(refresh_interval_minutes=5)
        job, _, _ = _build_job(FakeGitHubSource(), preferences=preferences)

        assert job.poll_interval() == 300
        preferences.values["refresh_interval_minutes"] = 1
        assert job.poll_interval() == 60


class TestRefreshFailures:
    def test_failure_keeps_previous_collections(self) -> None:
        source = _populated_source()
        job, _, queue = _build_job(source)
        job.refresh()
        previous = job.snapshot

        source.fail("fetch_review_requests", ToolExecutionError("HTTP 401: Bad credentials", exit_code=1))
        assert job.refresh() is True

        snapshot = job.snapshot
        assert snapshot.error == AUTH_REQUIRED_MESSAGE
        assert snapshot.is_loading is False
        assert snapshot.open_prs == previous.open_prs
        assert snapshot.last_updated == previous.last_updated
        assert queue.size() == 1

    def test_next_success_clears_the_error(self) -> None:
        source = FakeGitHubSource()
        source.fail("fetch_open_prs", ToolExecutionError("HTTP 502", exit_code=1))
        job, _, _ = _build_job(source)
        job.refresh()
        assert job.snapshot.error == "GitHub CLI error: HTTP 502"

        del source.failures["fetch_open_prs"]
        job.refresh()

        assert job.snapshot.error is None

    def test_username_failure_aborts_cycle(self) -> None:
        source = FakeGitHubSource()
        source.fail("fetch_username", ToolExecutionError("gh auth login", exit_code=4))
        logger = FakeLogger()
        job, _, _ = _build_job(source, logger=logger)

        job.refresh()

        assert job.snapshot.error == AUTH_REQUIRED_MESSAGE
        assert job.snapshot.username is None
        assert source.calls_to("fetch_open_prs") == []
        assert logger.messages("error") == ["Refresh failed"]


class TestSingleFlight:
    def test_refresh_requested_mid_cycle_is_rejected(self) -> None:
        nested_results: list[bool] = []

        class ReentrantSource(FakeGitHubSource):
            def fetch_open_prs(self):
                nested_results.append(job.refresh())
                return super().fetch_open_prs()

        source = ReentrantSource()
        job, _, _ = _build_job(source)

        assert job.refresh() is True
        assert nested_results == [False]
        assert len(source.calls_to("fetch_username")) == 1


class TestMuteReconciliation:
    def test_closed_prs_are_unmuted(self) -> None:
        source = FakeGitHubSource(open_prs=[make_pr(1)])
        source.details["acme/widgets#1"] = make_details()
        state = FakeMuteState(
            {"acme/widgets#1", "acme/widgets#99"},
            {"acme/widgets#1": at(-1), "acme/widgets#99": at(-1)},
        )
        job, mutes, _ = _build_job(source, mute_state=state)

        job.refresh()

        assert mutes.muted_ids() == frozenset({"acme/widgets#1"})
        assert job.attention_count() == 0

    def test_auto_unmute_runs_when_enabled(self) -> None:
        pr = make_pr(1, updated_at=at(2))
        source = FakeGitHubSource(open_prs=[pr])
        source.details[pr.id] = make_details(mergeable="CONFLICTING")
        source.comments[("acme/widgets", 1)] = [comment("jane", "@octocat please rebase", hours=1)]
        state = FakeMuteState({pr.id}, {pr.id: at(0)})
        job, mutes, _ = _build_job(source, mute_state=state)

        job.refresh()

        assert not mutes.is_muted(pr.id)
        assert job.attention_count() == 1

    def test_auto_unmute_skipped_when_disabled(self) -> None:
        pr = make_pr(1, updated_at=at(2))
        source = FakeGitHubSource(open_prs=[pr])
        source.details[pr.id] = make_details()
        source.comments[("acme/widgets", 1)] = [comment("jane", "@octocat please rebase", hours=1)]
        state = FakeMuteState({pr.id}, {pr.id: at(0)})
        job, mutes, _ = _build_job(
            source,
            mute_state=state,
            preferences=FakePreferences(auto_unmute_enabled=False),
        )

        job.refresh()

        assert mutes.is_muted(pr.id)
        assert source.calls_to("fetch_issue_comments") == []


class UnreachableStateStore(FakeStateStore):
    def __init__(self) -> None:
        super().__init__({"refreshInterval": "2"})
        self.down = False

    def read(self, key: str):
        if self.down:
            raise StateError("redis down")
        return super().read(key)


class TestStateOutage:
    def _job(self):
        store = UnreachableStateStore()
        logger = FakeLogger()
        job, _, queue = _build_job(
            _populated_source(),
            preferences=PreferencesStore(store, logger),
            logger=logger,
        )
        return job, store, queue, logger

    def test_interval_falls_back_to_last_good_value(self) -> None:
        job, store, _, logger = self._job()
        assert job.current_interval() == 120.0

        store.down = True

        assert job.current_interval() == 120.0
        assert "Poll interval unavailable, keeping previous" in logger.messages("warning")

    def test_interval_falls_back_to_default_before_any_read(self) -> None:
        job, store, _, _ = self._job()
        store.down = True

        job.setup()

        assert job.current_interval() == DEFAULT_REFRESH_INTERVAL

    def test_cycle_records_the_error_and_recovers(self) -> None:
        job, store, queue, _ = self._job()
        store.down = True

        assert job.refresh() is True
        assert job.snapshot.error == "redis down"
        assert queue.size() == 0

        store.down = False
        job.refresh()

        assert job.snapshot.error is None
        assert len(job.snapshot.open_prs) == 1
        assert queue.size() == 1
