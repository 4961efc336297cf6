import logging
from typing import Any, Mapping

from prwatch.core.ports.logger import Logger

_FORMAT = '%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s'


def _render_context(context: Mapping[str, Any]) -> str:
    return ' '.join(f'{key}={value!r}' for key, value in sorted(context.items()))


class _ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        rendered = super().format(record)
        context = getattr(record, 'context', None)
        if not context:
            return rendered
        # keep the traceback, if any, below the context line
        head, sep, tail = rendered.partition('\n')
        return f'{head} | {_render_context(context)}{sep}{tail}'


class ConsoleLogger(Logger):
    """Logs to stderr with keyword context appended as ``key=value`` pairs.

    Refresh cycles, enrichment and preview loads log from worker threads, so
    the thread name is part of every line.
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(_ContextFormatter(_FORMAT))
            self._logger.addHandler(handler)
        self._logger.propagate = False

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def _log(
        self,
        level: int,
        message: str,
        context: Mapping[str, Any],
        exc_info: bool = False,
    ) -> None:
        self._logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={'context': dict(context)},
        )
