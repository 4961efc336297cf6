import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from prwatch.config import Settings, load_settings
from prwatch.core.alerts import AlertTracker
from prwatch.core.enrichment import PREnricher
from prwatch.core.jobs import AlertJob, RefreshJob
from prwatch.core.mute import AutoUnmuteReconciler, MuteManager
from prwatch.core.ports.clock import Clock
from prwatch.core.ports.github_source import GitHubSource
from prwatch.core.ports.logger import Logger
from prwatch.core.ports.state_store import StateStore
from prwatch.core.preview import FocusTracker, PreviewCache
from prwatch.core.schema.snapshot import Snapshot
from prwatch.infra import (
    ConsoleLogger,
    FileStateStore,
    GhCliSource,
    GhCommandRunner,
    LogfireLogger,
    LoggingAlertSink,
    MemoryQueue,
    MuteStateStore,
    PreferencesStore,
    RedisStateStore,
    SystemClock,
    configure_logfire,
)

SNAPSHOT_QUEUE_SIZE = 16
PREVIEW_WORKERS = 2


@dataclass
class Application:
    logger: Logger
    preferences: PreferencesStore
    mutes: MuteManager
    refresh_job: RefreshJob
    alert_job: AlertJob
    preview_cache: PreviewCache
    focus_tracker: FocusTracker
    work_pool: ThreadPoolExecutor
    focus_pool: ThreadPoolExecutor
    preview_pool: ThreadPoolExecutor

    def shutdown(self) -> None:
        self.refresh_job.stop()
        self.alert_job.stop()
        self.focus_tracker.close()
        self.focus_pool.shutdown(wait=False, cancel_futures=True)
        self.preview_pool.shutdown(wait=False, cancel_futures=True)
        self.work_pool.shutdown(wait=False, cancel_futures=True)


def main() -> None:
    settings = load_settings()
    logger = _build_logger(settings)
    app = build_application(settings, logger)
    try:
        _run_jobs(logger, app.refresh_job, app.alert_job)
    finally:
        app.shutdown()


def build_application(
    settings: Settings,
    logger: Logger,
    *,
    clock: Optional[Clock] = None,
    source: Optional[GitHubSource] = None,
    state_store: Optional[StateStore] = None,
) -> Application:
    clock = clock or SystemClock()
    state_store = state_store or _build_state_store(settings)
    if source is None:
        runner = GhCommandRunner(
            settings.gh.binary_paths,
            timeout=settings.gh.command_timeout,
        )
        source = GhCliSource(runner)

    # enrichment and preview tasks never wait on their own pool
    work_pool = ThreadPoolExecutor(
        max_workers=settings.workers.max_workers,
        thread_name_prefix='prwatch-work',
    )
    focus_pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix='prwatch-focus')
    preview_pool = ThreadPoolExecutor(
        max_workers=PREVIEW_WORKERS,
        thread_name_prefix='prwatch-preview',
    )

    preferences = PreferencesStore(state_store, logger)
    mutes = MuteManager(MuteStateStore(state_store, logger), clock, logger)
    snapshot_queue = MemoryQueue[Snapshot](clock, max_size=SNAPSHOT_QUEUE_SIZE)

    refresh_job = RefreshJob(
        logger=logger,
        source=source,
        enricher=PREnricher(source, work_pool, logger),
        mutes=mutes,
        reconciler=AutoUnmuteReconciler(source, mutes, work_pool, logger),
        preferences=preferences,
        clock=clock,
        executor=work_pool,
        output_queue=snapshot_queue,
    )
    preferences.add_listener(lambda key: refresh_job.reschedule())

    alert_job = AlertJob(
        logger=logger,
        input_queue=snapshot_queue,
        tracker=AlertTracker(preferences),
        sink=LoggingAlertSink(logger),
    )
    preview_cache = PreviewCache(
        source,
        lambda: refresh_job.snapshot,
        preview_pool,
        logger,
    )
    focus_tracker = FocusTracker(preview_cache, clock, focus_pool)

    return Application(
        logger=logger,
        preferences=preferences,
        mutes=mutes,
        refresh_job=refresh_job,
        alert_job=alert_job,
        preview_cache=preview_cache,
        focus_tracker=focus_tracker,
        work_pool=work_pool,
        focus_pool=focus_pool,
        preview_pool=preview_pool,
    )


def _build_logger(settings: Settings) -> Logger:
    if settings.logging.backend == 'console':
        return ConsoleLogger(
            settings.logging.name,
            level=logging.getLevelName(settings.logging.level),
        )
    if settings.logging.backend == 'logfire':
        if not settings.logging.logfire_token:
            raise ValueError(
                'Logfire backend selected but PRWATCH_LOGFIRE_TOKEN is not set'
            )
        configure_logfire(settings.logging.logfire_token, settings.logging.name)
        return LogfireLogger(settings.logging.name)
    raise ValueError(f'Unknown logging backend {settings.logging.backend}')


def _build_state_store(settings: Settings) -> StateStore:
    if settings.state.backend == 'file':
        return FileStateStore(settings.state.base_dir)
    if settings.state.backend == 'redis':
        if not settings.state.redis_url:
            raise ValueError(
                'Redis state backend selected but PRWATCH_REDIS_URL is not set'
            )
        return RedisStateStore.from_url(settings.state.redis_url)
    raise ValueError(f'Unknown state backend {settings.state.backend}')


def _run_jobs(logger: Logger, refresh_job: RefreshJob, alert_job: AlertJob) -> None:
    alert_thread = threading.Thread(
        target=alert_job.run,
        name='AlertJob',
        daemon=True,
    )
    alert_thread.start()
    try:
        refresh_job.run()
    except KeyboardInterrupt:
        logger.info('Shutdown requested')
    finally:
        refresh_job.stop()
        alert_job.stop()
        alert_thread.join(timeout=5)


if __name__ == '__main__':
    main()
