from datetime import datetime, timezone

import fakeredis
import pytest

from tests.fakes import FakeClock, FakeLogger
from tests.settings import get_test_settings

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def redis_client():
    client = fakeredis.FakeRedis()
    yield client
    client.flushall()


@pytest.fixture
def test_settings(tmp_path):
    return get_test_settings(state_dir=str(tmp_path / "state"))


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def logger():
    return FakeLogger()
