import threading
from datetime import datetime
from typing import AbstractSet, Dict, Optional, Set

from prwatch.core.ports.clock import Clock
from prwatch.core.ports.logger import Logger
from prwatch.core.ports.mute_state import MuteState


class MuteManager:
    """Owns the set of muted PR ids and when each was muted.

    Both maps are written back through ``MuteState`` after every change.
    """

    def __init__(self, mute_state: MuteState, clock: Clock, logger: Logger) -> None:
        self._mute_state = mute_state
        self._clock = clock
        self._logger = logger
        self._lock = threading.RLock()
        muted_ids, timestamps = mute_state.load()
        self._muted_ids: Set[str] = set(muted_ids)
        self._timestamps: Dict[str, datetime] = {
            pr_id: muted_at
            for pr_id, muted_at in timestamps.items()
            if pr_id in self._muted_ids
        }

    def is_muted(self, pr_id: str) -> bool:
        with self._lock:
            return pr_id in self._muted_ids

    def muted_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._muted_ids)

    def muted_at(self, pr_id: str) -> Optional[datetime]:
        with self._lock:
            return self._timestamps.get(pr_id)

    def toggle_mute(self, pr_id: str) -> bool:
        """Flip the mute state of ``pr_id`` and return whether it is now muted."""
        with self._lock:
            if pr_id in self._muted_ids:
                self._remove(pr_id)
                muted = False
            else:
                self._muted_ids.add(pr_id)
                self._timestamps[pr_id] = self._clock.now()
                muted = True
            self._save()
        self._logger.info("Mute toggled", pr_id=pr_id, muted=muted)
        return muted

    def unmute(self, pr_id: str) -> bool:
        with self._lock:
            if pr_id not in self._muted_ids:
                return False
            self._remove(pr_id)
            self._save()
        return True

    def unmute_if_unchanged(self, pr_id: str, muted_at: datetime) -> bool:
        """Unmute only if the PR is still muted with the given timestamp.

        Guards against a mute that was toggled off and on again while its
        activity was being checked.
        """
        with self._lock:
            if self._timestamps.get(pr_id) != muted_at:
                return False
            return self.unmute(pr_id)

    def unmute_closed(self, open_pr_ids: AbstractSet[str]) -> Set[str]:
        with self._lock:
            closed = self._muted_ids - set(open_pr_ids)
            if not closed:
                return set()
            for pr_id in closed:
                self._remove(pr_id)
            self._save()
        self._logger.info("Unmuted pull requests no longer open", pr_ids=sorted(closed))
        return closed

    def _remove(self, pr_id: str) -> None:
        self._muted_ids.discard(pr_id)
        self._timestamps.pop(pr_id, None)

    def _save(self) -> None:
        self._mute_state.store(set(self._muted_ids), dict(self._timestamps))
