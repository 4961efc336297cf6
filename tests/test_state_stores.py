import json
from datetime import datetime, timezone

import pytest

from prwatch.core.exceptions import StateError
from prwatch.infra.state import (
    FileStateStore,
    MuteStateStore,
    PreferencesStore,
    RedisStateStore,
)
from tests.fakes import FakeLogger, FakeStateStore

MUTED_AT = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class TestFileStateStore:
    def test_round_trip_and_missing_key(self, tmp_path) -> None:
        store = FileStateStore(tmp_path / "state")

        assert store.read("mutedPRIds") is None
        store.write("mutedPRIds", '["a#1"]')

        assert store.read("mutedPRIds") == '["a#1"]'
        assert not list((tmp_path / "state").glob("*.tmp"))

    def test_keys_with_slashes_stay_in_base_dir(self, tmp_path) -> None:
        store = FileStateStore(tmp_path)

        store.write("acme/widgets", "x")

        assert (tmp_path / "acme_widgets.state").read_text(encoding="utf-8") == "x"

    def test_write_failure_is_a_state_error(self, tmp_path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = FileStateStore(blocker / "state")

        with pytest.raises(StateError):
            store.write("key", "value")


class TestRedisStateStore:
    def test_round_trip_with_prefix(self, redis_client) -> None:
        store = RedisStateStore(redis_client)

        store.write("refreshInterval", "10")

        assert store.read("refreshInterval") == "10"
        assert redis_client.get("prwatch:refreshInterval") == b"10"
        assert store.read("missing") is None

    def test_separate_prefixes_do_not_collide(self, redis_client) -> None:
        first = RedisStateStore(redis_client, key_prefix="one:")
        second = RedisStateStore(redis_client, key_prefix="two:")

        first.write("k", "1")

        assert second.read("k") is None


class TestMuteStateStore:
    def test_persists_ids_and_epoch_seconds(self) -> None:
        backing = FakeStateStore()
        store = MuteStateStore(backing, FakeLogger())

        store.store({"a#2", "a#1"}, {"a#1": MUTED_AT})

        assert json.loads(backing.read("mutedPRIds")) == ["a#1", "a#2"]
        assert json.loads(backing.read("mutedPRTimestamps")) == {"a#1": MUTED_AT.timestamp()}
        assert store.load() == ({"a#1", "a#2"}, {"a#1": MUTED_AT})

    def test_empty_store_loads_nothing(self) -> None:
        assert MuteStateStore(FakeStateStore(), FakeLogger()).load() == (set(), {})

    def test_unreadable_entries_are_discarded(self) -> None:
        backing = FakeStateStore({
            "mutedPRIds": "{not json",
            "mutedPRTimestamps": '["wrong", "shape"]',
        })
        logger = FakeLogger()

        assert MuteStateStore(backing, logger).load() == (set(), {})
        assert logger.messages("warning") == [
            "Discarding unreadable mute state",
            "Discarding unexpected mute state",
        ]

    def test_works_over_redis(self, redis_client) -> None:
        store = MuteStateStore(RedisStateStore(redis_client), FakeLogger())

        store.store({"a#1"}, {"a#1": MUTED_AT})

        assert store.load() == ({"a#1"}, {"a#1": MUTED_AT})


class TestPreferencesStore:
    def test_defaults(self) -> None:
        preferences = PreferencesStore(FakeStateStore(), FakeLogger())

        assert preferences.refresh_interval_minutes() == 5
        assert preferences.merged_days() == 3
        assert preferences.notification_hours() == 24
        assert preferences.auto_unmute_enabled() is True
        assert preferences.auto_unmute_humans_only() is True
        assert preferences.auto_unmute_mentions_only() is True
        assert preferences.alert_enabled("ci_failure") is True
        assert preferences.alert_enabled("unknown-kind") is False

    def test_set_persists_and_notifies(self) -> None:
        backing = FakeStateStore()
        preferences = PreferencesStore(backing, FakeLogger())
        changed: list[str] = []
        preferences.add_listener(changed.append)

        preferences.set("refreshInterval", 15)
        preferences.set("alertPRApproved", False)

        assert preferences.refresh_interval_minutes() == 15
        assert preferences.alert_enabled("approved") is False
        assert backing.read("refreshInterval") == "15"
        assert changed == ["refreshInterval", "alertPRApproved"]

    def test_rejects_unknown_keys_and_wrong_types(self) -> None:
        preferences = PreferencesStore(FakeStateStore(), FakeLogger())

        with pytest.raises(KeyError):
            preferences.set("colour", 1)
        with pytest.raises(TypeError):
            preferences.set("mergedDays", True)

    def test_bad_stored_values_fall_back_to_defaults(self) -> None:
        backing = FakeStateStore({
            "refreshInterval": "0",
            "mergedDays": '"seven"',
            "notificationHours": "oops",
            "autoUnmuteOnActivity": "1",
        })
        preferences = PreferencesStore(backing, FakeLogger())

        assert preferences.refresh_interval_minutes() == 5
        assert preferences.merged_days() == 3
        assert preferences.notification_hours() == 24
        assert preferences.auto_unmute_enabled() is True
