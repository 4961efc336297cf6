from prwatch.core.classification.attention import (
    REASON_CI_FAILURE,
    REASON_CONFLICTS,
    attention_reasons_for,
)
from prwatch.core.classification.filters import (
    filter_closed_against_merged,
    with_external_activity,
)
from prwatch.core.classification.status import (
    CIStatus,
    ReviewStatus,
    ci_status_from,
    failing_check_name,
    failing_checks,
    review_status_from,
)
from prwatch.core.classification.users import (
    BOT_PATTERNS,
    is_external_human,
    is_real_user,
    is_self,
)

__all__ = [
    "BOT_PATTERNS",
    "CIStatus",
    "REASON_CI_FAILURE",
    "REASON_CONFLICTS",
    "ReviewStatus",
    "attention_reasons_for",
    "ci_status_from",
    "failing_check_name",
    "failing_checks",
    "filter_closed_against_merged",
    "is_external_human",
    "is_real_user",
    "is_self",
    "review_status_from",
    "with_external_activity",
]
