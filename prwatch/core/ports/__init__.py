from prwatch.core.ports.alert_sink import AlertSink
from prwatch.core.ports.clock import Cancellable, Clock
from prwatch.core.ports.command_runner import CommandRunner
from prwatch.core.ports.github_source import GitHubSource
from prwatch.core.ports.logger import Logger
from prwatch.core.ports.mute_state import MuteState
from prwatch.core.ports.preferences import Preferences
from prwatch.core.ports.queue import Queue
from prwatch.core.ports.state_store import StateStore

__all__ = [
    "AlertSink",
    "Cancellable",
    "Clock",
    "CommandRunner",
    "GitHubSource",
    "Logger",
    "MuteState",
    "Preferences",
    "Queue",
    "StateStore",
]
