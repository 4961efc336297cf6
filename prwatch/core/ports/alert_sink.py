from typing import Protocol, runtime_checkable

from prwatch.core.alerts.events import AlertEvent


@runtime_checkable
class AlertSink(Protocol):
    def deliver(self, event: AlertEvent) -> None: ...
