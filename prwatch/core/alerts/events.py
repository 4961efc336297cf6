from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class AlertKind(Enum):
    REVIEW_REQUEST = "review_request"
    CI_FAILURE = "ci_failure"
    APPROVED = "approved"
    MENTION = "mention"


@dataclass(frozen=True, slots=True)
class AlertEvent:
    kind: AlertKind
    item_ids: Tuple[str, ...]
