from prwatch.infra.state.file_store import FileStateStore
from prwatch.infra.state.mute_state import MuteStateStore
from prwatch.infra.state.preferences import PreferencesStore
from prwatch.infra.state.redis_store import RedisStateStore

__all__ = [
    "FileStateStore",
    "MuteStateStore",
    "PreferencesStore",
    "RedisStateStore",
]
