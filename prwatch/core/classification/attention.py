from typing import Optional, Sequence, Tuple

from prwatch.core.classification.status import CIStatus, ci_status_from
from prwatch.core.schema.items import StatusCheck

REASON_CONFLICTS = "conflicts"
REASON_CI_FAILURE = "ci_failure"
CONFLICTING = "CONFLICTING"


def attention_reasons_for(
    mergeable: Optional[str],
    checks: Optional[Sequence[StatusCheck]],
) -> Tuple[str, ...]:
    reasons: list[str] = []
    if mergeable == CONFLICTING:
        reasons.append(REASON_CONFLICTS)
    if ci_status_from(checks) is CIStatus.FAILURE:
        reasons.append(REASON_CI_FAILURE)
    return tuple(reasons)
