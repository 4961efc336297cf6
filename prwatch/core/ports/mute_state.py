from datetime import datetime
from typing import Dict, Protocol, Set, Tuple, runtime_checkable


@runtime_checkable
class MuteState(Protocol):
    def load(self) -> Tuple[Set[str], Dict[str, datetime]]: ...

    def store(self, muted_ids: Set[str], timestamps: Dict[str, datetime]) -> None: ...
