import threading
from dataclasses import replace
from queue import Empty, Full, Queue as ThreadQueue
from typing import Dict, Generic, Optional, TypeVar
from uuid import uuid4

from prwatch.core.exceptions import QueueFullError
from prwatch.core.ports.clock import Clock
from prwatch.core.ports.queue import Queue
from prwatch.core.schema.queue import QueueMessage

T = TypeVar('T')


class MemoryQueue(Generic[T], Queue[T]):
    """In-process queue between the refresh and alert jobs.

    Messages handed out by ``get`` stay in flight until acked or nacked.
    A nack with requeue puts the message back with its attempt count kept.
    """

    def __init__(self, clock: Clock, max_size: Optional[int] = None) -> None:
        self._clock = clock
        self._queue: ThreadQueue[QueueMessage[T]] = ThreadQueue(
            maxsize=max_size or 0
        )
        self._in_flight: Dict[str, QueueMessage[T]] = {}
        self._lock = threading.Lock()

    def put(self, item: T) -> None:
        message = QueueMessage(
            payload=item,
            enqueued_at=self._clock.now(),
            attempt_count=0,
            message_id=str(uuid4()),
        )
        self._enqueue(message)

    def get(
        self, timeout: Optional[float] = None
    ) -> Optional[QueueMessage[T]]:
        try:
            message = self._queue.get(timeout=timeout)
        except Empty:
            return None
        delivered = replace(message, attempt_count=message.attempt_count + 1)
        with self._lock:
            self._in_flight[delivered.message_id] = delivered
        return delivered

    def ack(self, message: QueueMessage[T]) -> None:
        with self._lock:
            self._in_flight.pop(message.message_id, None)

    def nack(self, message: QueueMessage[T], requeue: bool) -> None:
        with self._lock:
            pending = self._in_flight.pop(message.message_id, None)
        # acked or already nacked messages are not requeued
        if requeue and pending is not None:
            self._enqueue(pending)

    def size(self) -> int:
        return self._queue.qsize()

    def _enqueue(self, message: QueueMessage[T]) -> None:
        try:
            self._queue.put_nowait(message)
        except Full as error:
            raise QueueFullError('Snapshot queue is full') from error
