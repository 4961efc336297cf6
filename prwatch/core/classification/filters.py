from typing import Iterable, List

from prwatch.core.schema.items import ExternalActivity, PullRequest


def filter_closed_against_merged(
    closed: Iterable[PullRequest],
    merged: Iterable[PullRequest],
) -> List[PullRequest]:
    """Drop closed PRs that the search API also reported as merged.

    Merged-date and closed-date windows overlap, so the same PR number can show
    up in both result sets.
    """
    merged_numbers = {pr.number for pr in merged}
    return [pr for pr in closed if pr.number not in merged_numbers]


def with_external_activity(merged: Iterable[PullRequest]) -> List[PullRequest]:
    return [pr for pr in merged if pr.external_activity is ExternalActivity.YES]
