from prwatch.core.alerts.events import AlertEvent, AlertKind
from prwatch.core.alerts.tracker import AlertTracker

__all__ = ["AlertEvent", "AlertKind", "AlertTracker"]
