import threading
from concurrent.futures import Executor
from typing import Optional

from prwatch.core.ports.clock import Cancellable, Clock
from prwatch.core.preview.cache import PreviewCache
from prwatch.core.schema.preview import PreviewDetails

CLEAR_DELAY_SECONDS = 0.15


class FocusTracker:
    """Tracks which PR the UI is focused on and loads its preview.

    Clearing is debounced: losing focus schedules a clear after a short grace
    period, and any new focus or pane hover before it fires cancels it.
    """

    def __init__(
        self,
        cache: PreviewCache,
        clock: Clock,
        executor: Executor,
        *,
        clear_delay: float = CLEAR_DELAY_SECONDS,
    ) -> None:
        self._cache = cache
        self._clock = clock
        self._executor = executor
        self._clear_delay = clear_delay
        self._lock = threading.Lock()
        self._focused_id: Optional[str] = None
        self._main_pane_hovered = False
        self._preview_pane_hovered = False
        self._pending_clear: Optional[Cancellable] = None
        self._clear_generation = 0

    @property
    def focused_id(self) -> Optional[str]:
        with self._lock:
            return self._focused_id

    def focus(self, pr_id: Optional[str]) -> None:
        with self._lock:
            self._cancel_pending_clear()
            self._focused_id = pr_id
        if pr_id is not None:
            self._executor.submit(self._cache.ensure_loaded, pr_id)

    def request_clear(self) -> None:
        with self._lock:
            if self._main_pane_hovered or self._preview_pane_hovered:
                return
            if self._focused_id is None:
                return
            self._schedule_clear()

    def set_main_pane_hovered(self, hovered: bool) -> None:
        with self._lock:
            self._main_pane_hovered = hovered
            self._on_pane_hover_changed(hovered)

    def set_preview_pane_hovered(self, hovered: bool) -> None:
        with self._lock:
            self._preview_pane_hovered = hovered
            self._on_pane_hover_changed(hovered)

    def current_preview(self) -> Optional[PreviewDetails]:
        focused = self.focused_id
        return self._cache.get(focused) if focused else None

    def current_error(self) -> Optional[str]:
        focused = self.focused_id
        return self._cache.error_for(focused) if focused else None

    def is_loading_current(self) -> bool:
        focused = self.focused_id
        return self._cache.is_loading(focused) if focused else False

    def close(self) -> None:
        with self._lock:
            self._cancel_pending_clear()

    def _on_pane_hover_changed(self, hovered: bool) -> None:
        if hovered:
            self._cancel_pending_clear()
        else:
            self._schedule_clear()

    def _schedule_clear(self) -> None:
        self._cancel_pending_clear()
        generation = self._clear_generation
        self._pending_clear = self._clock.call_later(
            self._clear_delay,
            lambda: self._clear_if_idle(generation),
        )

    def _cancel_pending_clear(self) -> None:
        self._clear_generation += 1
        if self._pending_clear is not None:
            self._pending_clear.cancel()
            self._pending_clear = None

    def _clear_if_idle(self, generation: int) -> None:
        with self._lock:
            # a timer that fired after being cancelled is stale
            if generation != self._clear_generation:
                return
            self._pending_clear = None
            if not self._main_pane_hovered and not self._preview_pane_hovered:
                self._focused_id = None
