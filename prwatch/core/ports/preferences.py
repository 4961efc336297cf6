from typing import Protocol, runtime_checkable


@runtime_checkable
class Preferences(Protocol):
    def refresh_interval_minutes(self) -> int: ...

    def merged_days(self) -> int: ...

    def notification_hours(self) -> int: ...

    def auto_unmute_enabled(self) -> bool: ...

    def auto_unmute_humans_only(self) -> bool: ...

    def auto_unmute_mentions_only(self) -> bool: ...

    def alert_enabled(self, kind: str) -> bool: ...
