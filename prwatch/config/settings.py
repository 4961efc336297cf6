import os
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_GH_PATHS: Tuple[str, ...] = (
    "/opt/homebrew/bin/gh",
    "/usr/local/bin/gh",
    "/run/current-system/sw/bin/gh",
    "/etc/profiles/per-user/{user}/bin/gh",
    "/usr/bin/gh",
)


@dataclass(frozen=True, slots=True)
class GhSettings:
    binary_paths: Tuple[str, ...]
    command_timeout: float


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    backend: str
    name: str
    level: str
    logfire_token: Optional[str]


@dataclass(frozen=True, slots=True)
class WorkerSettings:
    max_workers: int


@dataclass(frozen=True, slots=True)
class StateSettings:
    backend: str
    base_dir: str
    redis_url: Optional[str]


@dataclass(frozen=True, slots=True)
class Settings:
    gh: GhSettings
    logging: LoggingSettings
    workers: WorkerSettings
    state: StateSettings


def load_settings() -> Settings:
    from dotenv import load_dotenv

    load_dotenv()

    gh_paths = _env_paths("PRWATCH_GH_PATHS", DEFAULT_GH_PATHS)
    command_timeout = _env_float("PRWATCH_COMMAND_TIMEOUT", 30.0)

    logging_backend = _get_env_or_default("PRWATCH_LOGGER_BACKEND", "console").lower()
    logging_name = _get_env_or_default("PRWATCH_LOGGER_NAME", "prwatch")
    logging_level = _get_env_or_default("PRWATCH_LOG_LEVEL", "INFO").upper()
    logfire_token = _get_env_or_default("PRWATCH_LOGFIRE_TOKEN")

    max_workers = _env_int("PRWATCH_MAX_WORKERS", 8)

    state_backend = _get_env_or_default("PRWATCH_STATE_BACKEND", "file").lower()
    state_dir = _get_env_or_default("PRWATCH_STATE_DIR", ".prwatch/state")
    redis_url = _get_env_or_default("PRWATCH_REDIS_URL")

    return Settings(
        gh=GhSettings(binary_paths=gh_paths, command_timeout=command_timeout),
        logging=LoggingSettings(
            backend=logging_backend,
            name=logging_name,
            level=logging_level,
            logfire_token=logfire_token,
        ),
        workers=WorkerSettings(max_workers=max_workers),
        state=StateSettings(
            backend=state_backend,
            base_dir=state_dir,
            redis_url=redis_url,
        ),
    )


def _get_env_or_default(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if not value:
        return default
    return value


def _env_int(name: str, default: int) -> int:
    return int(_get_env_or_default(name) or default)


def _env_float(name: str, default: float) -> float:
    return float(_get_env_or_default(name) or default)


def _env_paths(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = _get_env_or_default(name)
    if value is None:
        return default
    return tuple(path for path in value.split(os.pathsep) if path)
