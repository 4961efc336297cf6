import json
import threading
from typing import Callable, Dict, List, Union

from prwatch.core.ports.logger import Logger
from prwatch.core.ports.preferences import Preferences
from prwatch.core.ports.state_store import StateStore

PreferenceValue = Union[int, bool]

REFRESH_INTERVAL = "refreshInterval"
MERGED_DAYS = "mergedDays"
NOTIFICATION_HOURS = "notificationHours"
AUTO_UNMUTE_ON_ACTIVITY = "autoUnmuteOnActivity"
AUTO_UNMUTE_ONLY_HUMANS = "autoUnmuteOnlyHumans"
AUTO_UNMUTE_ONLY_MENTIONS = "autoUnmuteOnlyMentions"

DEFAULTS: Dict[str, PreferenceValue] = {
    REFRESH_INTERVAL: 5,
    MERGED_DAYS: 3,
    NOTIFICATION_HOURS: 24,
    AUTO_UNMUTE_ON_ACTIVITY: True,
    AUTO_UNMUTE_ONLY_HUMANS: True,
    AUTO_UNMUTE_ONLY_MENTIONS: True,
    "alertNewReviewRequest": True,
    "alertCIFailure": True,
    "alertPRApproved": True,
    "alertNewMention": True,
}

ALERT_KEYS: Dict[str, str] = {
    "review_request": "alertNewReviewRequest",
    "ci_failure": "alertCIFailure",
    "approved": "alertPRApproved",
    "mention": "alertNewMention",
}


class PreferencesStore(Preferences):
    """User preferences over a ``StateStore``, one JSON value per key.

    Values are read on every call so a change made through ``set`` (or by
    another process sharing the store) applies to the next refresh cycle.
    """

    def __init__(self, state_store: StateStore, logger: Logger) -> None:
        self._state_store = state_store
        self._logger = logger
        self._listeners: List[Callable[[str], None]] = []
        self._lock = threading.Lock()

    def refresh_interval_minutes(self) -> int:
        return self._positive_int(REFRESH_INTERVAL)

    def merged_days(self) -> int:
        return self._positive_int(MERGED_DAYS)

    def notification_hours(self) -> int:
        return self._positive_int(NOTIFICATION_HOURS)

    def auto_unmute_enabled(self) -> bool:
        return self._flag(AUTO_UNMUTE_ON_ACTIVITY)

    def auto_unmute_humans_only(self) -> bool:
        return self._flag(AUTO_UNMUTE_ONLY_HUMANS)

    def auto_unmute_mentions_only(self) -> bool:
        return self._flag(AUTO_UNMUTE_ONLY_MENTIONS)

    def alert_enabled(self, kind: str) -> bool:
        key = ALERT_KEYS.get(kind)
        if key is None:
            return False
        return self._flag(key)

    def get(self, key: str) -> PreferenceValue:
        if key not in DEFAULTS:
            raise KeyError(key)
        default = DEFAULTS[key]
        stored = self._state_store.read(key)
        if stored is None:
            return default
        try:
            value = json.loads(stored)
        except json.JSONDecodeError:
            self._logger.warning("Ignoring unreadable preference", key=key)
            return default
        # bool is an int subclass, so compare exact types
        if type(value) is not type(default):
            self._logger.warning("Ignoring preference of wrong type", key=key)
            return default
        return value

    def set(self, key: str, value: PreferenceValue) -> None:
        if key not in DEFAULTS:
            raise KeyError(key)
        if type(value) is not type(DEFAULTS[key]):
            raise TypeError(
                f"{key} expects {type(DEFAULTS[key]).__name__}, "
                f"got {type(value).__name__}"
            )
        self._state_store.write(key, json.dumps(value))
        self._logger.info("Preference updated", key=key, value=value)
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(key)

    def add_listener(self, listener: Callable[[str], None]) -> None:
        with self._lock:
            self._listeners.append(listener)

    def _positive_int(self, key: str) -> int:
        value = self.get(key)
        if value < 1:
            return DEFAULTS[key]
        return value

    def _flag(self, key: str) -> bool:
        return self.get(key)
