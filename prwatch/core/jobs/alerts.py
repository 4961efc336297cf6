from prwatch.core.alerts import AlertEvent, AlertTracker
from prwatch.core.exceptions import PRWatchError
from prwatch.core.jobs.base import BaseJob
from prwatch.core.ports.alert_sink import AlertSink
from prwatch.core.ports.logger import Logger
from prwatch.core.ports.queue import Queue
from prwatch.core.schema.queue import QueueMessage
from prwatch.core.schema.snapshot import Snapshot

DEFAULT_GET_TIMEOUT = 1.0
DEFAULT_MAX_ATTEMPTS = 3


class AlertJob(BaseJob):
    """Consumes published snapshots and delivers alerts for new items.

    A snapshot that cannot be evaluated is nacked. It is requeued while
    attempts remain and no newer snapshot is waiting behind it; otherwise it
    is dropped and the next snapshot is diffed against the last good one.
    """

    def __init__(
        self,
        logger: Logger,
        input_queue: Queue[Snapshot],
        tracker: AlertTracker,
        sink: AlertSink,
        *,
        get_timeout: float = DEFAULT_GET_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        super().__init__(logger, poll_interval=0)
        self._input_queue = input_queue
        self._tracker = tracker
        self._sink = sink
        self._get_timeout = get_timeout
        self._max_attempts = max_attempts

    def setup(self) -> None:
        self._tracker.reset()

    def execute_once(self) -> None:
        message = self._input_queue.get(timeout=self._get_timeout)
        if message is None:
            return

        try:
            events = self._tracker.observe(message.payload)
        except PRWatchError as error:
            self._reject(message, error)
            return

        delivered = 0
        for event in events:
            if self._deliver(event):
                delivered += 1
        # the tracker has already moved past this snapshot, so never requeue
        self._input_queue.ack(message)
        if events:
            self._logger.info(
                "Alerts processed",
                event_count=len(events),
                delivered=delivered,
            )

    def teardown(self) -> None:
        return

    def _reject(self, message: QueueMessage[Snapshot], error: PRWatchError) -> None:
        requeue = (
            message.attempt_count < self._max_attempts
            and self._input_queue.size() == 0
        )
        self._logger.exception(
            "Alert evaluation failed",
            attempt_count=message.attempt_count,
            requeue=requeue,
            error=str(error),
        )
        self._input_queue.nack(message, requeue=requeue)

    def _deliver(self, event: AlertEvent) -> bool:
        try:
            self._sink.deliver(event)
        except PRWatchError as error:
            self._logger.exception(
                "Alert delivery failed",
                kind=event.kind.value,
                item_ids=list(event.item_ids),
                error=str(error),
            )
            return False
        return True
