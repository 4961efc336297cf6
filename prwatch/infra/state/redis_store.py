from typing import Optional

import redis

from prwatch.core.exceptions import StateError
from prwatch.core.ports.state_store import StateStore

DEFAULT_KEY_PREFIX = "prwatch:"


class RedisStateStore(StateStore):
    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ) -> None:
        self._client = client
        self._key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = DEFAULT_KEY_PREFIX) -> "RedisStateStore":
        return cls(redis.Redis.from_url(url), key_prefix=key_prefix)

    def read(self, key: str) -> Optional[str]:
        try:
            value = self._client.get(self._key(key))
        except redis.RedisError as error:
            raise StateError(f"Failed to read state {key}: {error}") from error
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def write(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except redis.RedisError as error:
            raise StateError(f"Failed to write state {key}: {error}") from error

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"
