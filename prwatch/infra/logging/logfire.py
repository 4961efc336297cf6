from typing import Any

from prwatch.core.ports.logger import Logger


def _load_logfire():
    try:
        import logfire
    except ImportError as error:
        raise RuntimeError(
            'logfire library is not installed, install prwatch[logfire]'
        ) from error
    return logfire


def configure_logfire(api_token: str, service_name: str) -> None:
    logfire = _load_logfire()
    logfire.configure(token=api_token, service_name=service_name)


class LogfireLogger(Logger):
    """Forwards structured context to logfire as span attributes."""

    def __init__(self, name: str) -> None:
        self._logfire = _load_logfire()
        self._tags = (name,)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logfire.debug(message, _tags=self._tags, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._logfire.info(message, _tags=self._tags, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logfire.warn(message, _tags=self._tags, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._logfire.error(message, _tags=self._tags, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        self._logfire.exception(message, _tags=self._tags, **kwargs)
