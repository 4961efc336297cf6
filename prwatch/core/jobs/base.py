import threading
from abc import ABC, abstractmethod
from typing import final

from prwatch.core.exceptions import PRWatchError
from prwatch.core.ports.logger import Logger


class BaseJob(ABC):
    def __init__(self, logger: Logger, poll_interval: float) -> None:
        self._logger = logger
        self._poll_interval = poll_interval
        self._running = False
        self._wakeup = threading.Event()
        self._run_now = False
        self._last_interval = poll_interval

    @final
    def run(self) -> None:
        job_name = self.__class__.__name__
        self._running = True
        self._logger.info("Job starting", job=job_name)
        try:
            self.setup()
            while self._running and self.should_continue():
                try:
                    self.execute_once()
                except PRWatchError as error:
                    self.handle_error(error)
                self._wait_for_next_cycle()
        finally:
            try:
                self.teardown()
            finally:
                self._running = False
                self._logger.info("Job stopping", job=job_name)

    @abstractmethod
    def setup(self) -> None: ...

    @abstractmethod
    def execute_once(self) -> None: ...

    @abstractmethod
    def teardown(self) -> None: ...

    def handle_error(self, error: PRWatchError) -> None:
        self._logger.exception(
            "Job error",
            error=str(error),
            job=self.__class__.__name__,
        )

    def should_continue(self) -> bool:
        return True

    def poll_interval(self) -> float:
        return self._poll_interval

    def current_interval(self) -> float:
        """Read ``poll_interval``, keeping the last good value if it fails."""
        try:
            self._last_interval = self.poll_interval()
        except PRWatchError as error:
            self._logger.warning(
                "Poll interval unavailable, keeping previous",
                error=str(error),
                interval=self._last_interval,
                job=self.__class__.__name__,
            )
        return self._last_interval

    def stop(self) -> None:
        self._running = False
        self._wakeup.set()

    def trigger(self) -> None:
        """Cut the current wait short and run the next cycle now."""
        self._run_now = True
        self._wakeup.set()

    def reschedule(self) -> None:
        """Restart the wait using a freshly read ``poll_interval``."""
        self._wakeup.set()

    def _wait_for_next_cycle(self) -> None:
        while self._running:
            interval = self.current_interval()
            if interval <= 0:
                return
            woken = self._wakeup.wait(interval)
            self._wakeup.clear()
            if not woken or self._run_now:
                self._run_now = False
                return
