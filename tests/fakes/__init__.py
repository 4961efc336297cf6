from tests.fakes.clock import FakeClock, FakeTimer
from tests.fakes.executor import InlineExecutor
from tests.fakes.github import FakeCommandRunner, FakeGitHubSource, OverlapTrackingSource
from tests.fakes.logger import FakeLogger
from tests.fakes.mute_state import FakeMuteState
from tests.fakes.preferences import FakePreferences
from tests.fakes.queue import FakeQueue
from tests.fakes.state_store import FakeStateStore

__all__ = [
    "FakeClock",
    "FakeCommandRunner",
    "FakeGitHubSource",
    "FakeLogger",
    "FakeMuteState",
    "FakePreferences",
    "FakeQueue",
    "FakeStateStore",
    "FakeTimer",
    "InlineExecutor",
    "OverlapTrackingSource",
]
