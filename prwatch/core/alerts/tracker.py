from typing import Callable, Dict, FrozenSet, List

from prwatch.core.alerts.events import AlertEvent, AlertKind
from prwatch.core.classification import CIStatus, ci_status_from
from prwatch.core.ports.preferences import Preferences
from prwatch.core.schema.snapshot import Snapshot

MENTION_REASON = "mention"
APPROVED_DECISION = "APPROVED"


def _review_request_ids(snapshot: Snapshot) -> FrozenSet[str]:
    return frozenset(request.id for request in snapshot.review_requests)


def _ci_failure_ids(snapshot: Snapshot) -> FrozenSet[str]:
    return frozenset(
        pr.id
        for pr in snapshot.open_prs
        if ci_status_from(pr.status_checks) is CIStatus.FAILURE
    )


def _approved_ids(snapshot: Snapshot) -> FrozenSet[str]:
    return frozenset(
        pr.id for pr in snapshot.open_prs if pr.review_decision == APPROVED_DECISION
    )


def _mention_ids(snapshot: Snapshot) -> FrozenSet[str]:
    return frozenset(
        notification.id
        for notification in snapshot.notifications
        if notification.reason == MENTION_REASON
    )


_SELECTORS: Dict[AlertKind, Callable[[Snapshot], FrozenSet[str]]] = {
    AlertKind.REVIEW_REQUEST: _review_request_ids,
    AlertKind.CI_FAILURE: _ci_failure_ids,
    AlertKind.APPROVED: _approved_ids,
    AlertKind.MENTION: _mention_ids,
}


class AlertTracker:
    """Diffs each published snapshot against the previous one.

    The first snapshot only seeds what has been seen so start-up does not
    raise an alert for everything already pending.
    """

    def __init__(self, preferences: Preferences) -> None:
        self._preferences = preferences
        self._seen: Dict[AlertKind, FrozenSet[str]] = {}
        self._initialized = False

    def observe(self, snapshot: Snapshot) -> List[AlertEvent]:
        current = {kind: select(snapshot) for kind, select in _SELECTORS.items()}
        if not self._initialized:
            self._seen = current
            self._initialized = True
            return []

        events: List[AlertEvent] = []
        for kind, ids in current.items():
            new_ids = ids - self._seen.get(kind, frozenset())
            if new_ids and self._preferences.alert_enabled(kind.value):
                events.append(AlertEvent(kind=kind, item_ids=tuple(sorted(new_ids))))
        self._seen = current
        return events

    def reset(self) -> None:
        self._seen = {}
        self._initialized = False
