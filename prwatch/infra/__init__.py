from prwatch.infra.alerts import LoggingAlertSink
from prwatch.infra.clock import SystemClock
from prwatch.infra.github import GhCliSource, GhCommandRunner
from prwatch.infra.logging import ConsoleLogger, LogfireLogger, configure_logfire
from prwatch.infra.queue import MemoryQueue
from prwatch.infra.state import (
    FileStateStore,
    MuteStateStore,
    PreferencesStore,
    RedisStateStore,
)

__all__ = [
    'GhCliSource',
    'GhCommandRunner',
    'MemoryQueue',
    'ConsoleLogger',
    'LogfireLogger',
    'configure_logfire',
    'SystemClock',
    'FileStateStore',
    'RedisStateStore',
    'MuteStateStore',
    'PreferencesStore',
    'LoggingAlertSink',
]
