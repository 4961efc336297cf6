from datetime import datetime, timezone
from typing import Generic, Optional, TypeVar

from prwatch.core.exceptions import QueueFullError
from prwatch.core.ports.clock import Clock
from prwatch.core.ports.queue import Queue
from prwatch.core.schema.queue import QueueMessage

T = TypeVar("T")


class FakeQueue(Generic[T], Queue[T]):
    def __init__(
        self,
        clock: Clock | None = None,
        max_size: Optional[int] = None,
    ) -> None:
        self._clock = clock
        self._max_size = max_size
        self._items: list[QueueMessage[T]] = []
        self._pending: dict[str, QueueMessage[T]] = {}
        self._counter = 0
        self.acked: list[QueueMessage[T]] = []
        self.nacked: list[tuple[QueueMessage[T], bool]] = []

    def put(self, item: T) -> None:
        if self._max_size is not None and len(self._items) >= self._max_size:
            raise QueueFullError("Queue is full")
        self._counter += 1
        self._items.append(
            QueueMessage(
                payload=item,
                enqueued_at=self._now(),
                attempt_count=0,
                message_id=f"fake-{self._counter}",
            )
        )

    def get(self, timeout: Optional[float] = None) -> Optional[QueueMessage[T]]:  # noqa: ARG002
        if not self._items:
            return None
        message = self._items.pop(0)
        incremented = QueueMessage(
            payload=message.payload,
            enqueued_at=message.enqueued_at,
            attempt_count=message.attempt_count + 1,
            message_id=message.message_id,
        )
        self._pending[message.message_id] = incremented
        return incremented

    def ack(self, message: QueueMessage[T]) -> None:
        self._pending.pop(message.message_id, None)
        self.acked.append(message)

    def nack(self, message: QueueMessage[T], requeue: bool) -> None:
        pending = self._pending.pop(message.message_id, None)
        self.nacked.append((message, requeue))
        if requeue and pending is not None:
            self._items.append(pending)

    def size(self) -> int:
        return len(self._items)

    def payloads(self) -> list[T]:
        return [message.payload for message in self._items]

    def _now(self) -> datetime:
        if self._clock:
            return self._clock.now()
        return datetime.now(timezone.utc)
