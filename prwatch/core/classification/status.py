from enum import Enum
from typing import Optional, Sequence

from prwatch.core.schema.items import StatusCheck

FAILURE = "FAILURE"
SUCCESS = "SUCCESS"


class CIStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    UNKNOWN = "unknown"


class ReviewStatus(Enum):
    APPROVED = "approved"
    CHANGES_REQUESTED = "changes_requested"
    PENDING = "pending"
    UNKNOWN = "unknown"


_REVIEW_DECISIONS = {
    "APPROVED": ReviewStatus.APPROVED,
    "CHANGES_REQUESTED": ReviewStatus.CHANGES_REQUESTED,
    "REVIEW_REQUIRED": ReviewStatus.PENDING,
}


def ci_status_from(checks: Optional[Sequence[StatusCheck]]) -> CIStatus:
    if not checks:
        return CIStatus.UNKNOWN
    if any(check.has_outcome(FAILURE) for check in checks):
        return CIStatus.FAILURE
    if all(check.has_outcome(SUCCESS) for check in checks):
        return CIStatus.SUCCESS
    return CIStatus.PENDING


def review_status_from(decision: Optional[str]) -> ReviewStatus:
    return _REVIEW_DECISIONS.get(decision or "", ReviewStatus.UNKNOWN)


def failing_checks(checks: Optional[Sequence[StatusCheck]]) -> list[StatusCheck]:
    return [check for check in checks or () if check.has_outcome(FAILURE)]


def failing_check_name(checks: Optional[Sequence[StatusCheck]]) -> Optional[str]:
    """Name of the first failing check in rollup order."""
    failed = failing_checks(checks)
    if not failed:
        return None
    return failed[0].name
