from concurrent.futures import Executor, Future, as_completed
from dataclasses import dataclass, replace
from itertools import chain
from typing import Iterable, List, Optional, Sequence, Tuple

from prwatch.core.classification import (
    attention_reasons_for,
    failing_check_name,
    is_external_human,
)
from prwatch.core.exceptions import PRWatchError, describe_error
from prwatch.core.ports.github_source import GitHubSource
from prwatch.core.ports.logger import Logger
from prwatch.core.schema.items import ExternalActivity, PRDetails, PullRequest

APPROVED = "APPROVED"


@dataclass(frozen=True, slots=True)
class _ActivityFetch:
    pr: PullRequest
    comments: Future
    reviews: Future


class PREnricher:
    """Adds per-PR detail to search results.

    Every fetch gets its own task on the executor, submitted from the calling
    thread. A PR whose detail cannot be fetched is returned unchanged (open
    PRs) or marked as having no external activity (merged PRs); it never fails
    the batch.
    """

    def __init__(
        self,
        source: GitHubSource,
        executor: Executor,
        logger: Logger,
    ) -> None:
        self._source = source
        self._executor = executor
        self._logger = logger

    def enrich_open_prs(self, prs: Sequence[PullRequest]) -> List[PullRequest]:
        return _by_updated(_gather(self._submit_open(prs)))

    def enrich_merged_prs(
        self,
        prs: Sequence[PullRequest],
        username: Optional[str],
    ) -> List[PullRequest]:
        if not username:
            return list(prs)
        return self._resolve_merged(self._submit_merged(prs), username)

    def enrich_all(
        self,
        open_prs: Sequence[PullRequest],
        merged_prs: Sequence[PullRequest],
        username: Optional[str],
    ) -> Tuple[List[PullRequest], List[PullRequest]]:
        """Enrich open and merged PRs with both fan-outs in flight together."""
        open_futures = self._submit_open(open_prs)
        if not username:
            return _by_updated(_gather(open_futures)), list(merged_prs)
        merged_fetches = self._submit_merged(merged_prs)
        return (
            _by_updated(_gather(open_futures)),
            self._resolve_merged(merged_fetches, username),
        )

    def enrich_pr(self, pr: PullRequest) -> PullRequest:
        try:
            details = self._source.fetch_pr_details(pr)
        except PRWatchError as error:
            self._logger.warning(
                "Failed to enrich pull request",
                pr_id=pr.id,
                error=describe_error(error),
            )
            return pr
        return apply_details(pr, details)

    def check_external_activity(self, pr: PullRequest, username: str) -> PullRequest:
        return self._resolve_activity(self._submit_activity(pr), username)

    def _resolve_activity(self, fetch: _ActivityFetch, username: str) -> PullRequest:
        pr = fetch.pr
        try:
            comments = fetch.comments.result()
            reviews = fetch.reviews.result()
        except PRWatchError as error:
            self._logger.warning(
                "Failed to check activity for pull request",
                pr_id=pr.id,
                error=describe_error(error),
            )
            return replace(pr, external_activity=ExternalActivity.NO)

        has_activity = any(
            is_external_human(record.author, record.author_type, username)
            for record in chain(comments, reviews)
        )
        activity = ExternalActivity.YES if has_activity else ExternalActivity.NO
        return replace(pr, external_activity=activity)

    def _submit_open(self, prs: Iterable[PullRequest]) -> List[Future]:
        return [self._executor.submit(self.enrich_pr, pr) for pr in prs]

    def _submit_merged(self, prs: Iterable[PullRequest]) -> List[_ActivityFetch]:
        return [self._submit_activity(pr) for pr in prs]

    def _submit_activity(self, pr: PullRequest) -> _ActivityFetch:
        submit = self._executor.submit
        return _ActivityFetch(
            pr=pr,
            comments=submit(self._source.fetch_issue_comments, pr.repository, pr.number),
            reviews=submit(self._source.fetch_pr_reviews, pr.repository, pr.number),
        )

    def _resolve_merged(
        self,
        fetches: List[_ActivityFetch],
        username: str,
    ) -> List[PullRequest]:
        return _by_merged([self._resolve_activity(fetch, username) for fetch in fetches])


def apply_details(pr: PullRequest, details: PRDetails) -> PullRequest:
    reasons = attention_reasons_for(details.mergeable, details.status_checks)
    return replace(
        pr,
        mergeable=details.mergeable,
        review_decision=details.review_decision,
        status_checks=details.status_checks,
        comments_count=details.comments_count,
        approvals_count=sum(1 for state in details.review_states if state == APPROVED),
        reviewers_count=len(set(details.reviewer_logins)) + details.review_requests_count,
        failing_check=failing_check_name(details.status_checks),
        needs_attention=bool(reasons),
        attention_reasons=reasons,
    )


def _gather(futures: List[Future]) -> List[PullRequest]:
    return [future.result() for future in as_completed(futures)]


def _by_updated(prs: List[PullRequest]) -> List[PullRequest]:
    return sorted(prs, key=lambda pr: pr.updated_at, reverse=True)


def _by_merged(prs: List[PullRequest]) -> List[PullRequest]:
    return sorted(prs, key=lambda pr: pr.merged_at or pr.updated_at, reverse=True)
