import threading
from concurrent.futures import Executor
from typing import Callable, Dict, Optional, Set

from prwatch.core.exceptions import PRWatchError, describe_error
from prwatch.core.ports.github_source import GitHubSource
from prwatch.core.ports.logger import Logger
from prwatch.core.preview.builder import build_preview_details
from prwatch.core.schema.items import PullRequest
from prwatch.core.schema.preview import PreviewDetails
from prwatch.core.schema.snapshot import Snapshot


class PreviewCache:
    """On-demand preview details keyed by PR id.

    Entries live until ``invalidate`` or ``clear`` removes them. A failed load
    leaves an error message and no entry, so calling ``ensure_loaded`` again
    retries.
    """

    def __init__(
        self,
        source: GitHubSource,
        snapshot_provider: Callable[[], Snapshot],
        executor: Executor,
        logger: Logger,
    ) -> None:
        self._source = source
        self._snapshot_provider = snapshot_provider
        self._executor = executor
        self._logger = logger
        self._lock = threading.Lock()
        self._entries: Dict[str, PreviewDetails] = {}
        self._loading: Set[str] = set()
        self._errors: Dict[str, str] = {}

    def get(self, pr_id: str) -> Optional[PreviewDetails]:
        with self._lock:
            return self._entries.get(pr_id)

    def error_for(self, pr_id: str) -> Optional[str]:
        with self._lock:
            return self._errors.get(pr_id)

    def is_loading(self, pr_id: str) -> bool:
        with self._lock:
            return pr_id in self._loading

    def ensure_loaded(self, pr_id: str) -> None:
        snapshot = self._snapshot_provider()
        with self._lock:
            if pr_id in self._entries or pr_id in self._loading:
                return
            pr = snapshot.find_open_pr(pr_id)
            if pr is None:
                return
            self._loading.add(pr_id)
            self._errors.pop(pr_id, None)

        try:
            details = self._fetch(pr, snapshot.username)
        except PRWatchError as error:
            with self._lock:
                self._errors[pr_id] = describe_error(error)
            self._logger.warning(
                "Failed to fetch preview",
                pr_id=pr_id,
                error=describe_error(error),
            )
        else:
            with self._lock:
                self._entries[pr_id] = details
        finally:
            with self._lock:
                self._loading.discard(pr_id)

    def invalidate(self, pr_id: str) -> None:
        with self._lock:
            self._entries.pop(pr_id, None)
            self._errors.pop(pr_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._errors.clear()

    def _fetch(self, pr: PullRequest, username: Optional[str]) -> PreviewDetails:
        files_future = self._executor.submit(self._source.fetch_preview_files, pr)
        comments = self._source.fetch_issue_comments(pr.repository, pr.number)
        files = files_future.result()
        return build_preview_details(pr, files, comments, username)
