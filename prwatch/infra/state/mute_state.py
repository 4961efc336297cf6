import json
from datetime import datetime, timezone
from typing import Dict, Set, Tuple

from prwatch.core.ports.logger import Logger
from prwatch.core.ports.mute_state import MuteState
from prwatch.core.ports.state_store import StateStore


class MuteStateStore(MuteState):
    """Persists mutes as two entries: the id list and id -> epoch seconds."""

    _IDS_KEY = "mutedPRIds"
    _TIMESTAMPS_KEY = "mutedPRTimestamps"

    def __init__(self, state_store: StateStore, logger: Logger) -> None:
        self._state_store = state_store
        self._logger = logger

    def load(self) -> Tuple[Set[str], Dict[str, datetime]]:
        raw_ids = self._read_json(self._IDS_KEY, list)
        raw_timestamps = self._read_json(self._TIMESTAMPS_KEY, dict)

        muted_ids = {pr_id for pr_id in raw_ids if isinstance(pr_id, str)}
        timestamps: Dict[str, datetime] = {}
        for pr_id, seconds in raw_timestamps.items():
            if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
                timestamps[pr_id] = datetime.fromtimestamp(seconds, tz=timezone.utc)
        return muted_ids, timestamps

    def store(self, muted_ids: Set[str], timestamps: Dict[str, datetime]) -> None:
        self._state_store.write(self._IDS_KEY, json.dumps(sorted(muted_ids)))
        self._state_store.write(
            self._TIMESTAMPS_KEY,
            json.dumps(
                {pr_id: muted_at.timestamp() for pr_id, muted_at in timestamps.items()},
                sort_keys=True,
            ),
        )

    def _read_json(self, key: str, expected: type):
        stored = self._state_store.read(key)
        if not stored:
            return expected()
        try:
            value = json.loads(stored)
        except json.JSONDecodeError:
            self._logger.warning("Discarding unreadable mute state", key=key)
            return expected()
        if not isinstance(value, expected):
            self._logger.warning("Discarding unexpected mute state", key=key)
            return expected()
        return value
