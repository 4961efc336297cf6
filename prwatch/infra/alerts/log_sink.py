from prwatch.core.alerts import AlertEvent, AlertKind
from prwatch.core.ports.alert_sink import AlertSink
from prwatch.core.ports.logger import Logger

_TITLES = {
    AlertKind.REVIEW_REQUEST: "New review request",
    AlertKind.CI_FAILURE: "CI failed",
    AlertKind.APPROVED: "Pull request approved",
    AlertKind.MENTION: "You were mentioned",
}


class LoggingAlertSink(AlertSink):
    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def deliver(self, event: AlertEvent) -> None:
        self._logger.info(
            _TITLES[event.kind],
            kind=event.kind.value,
            count=len(event.item_ids),
            item_ids=list(event.item_ids),
        )
