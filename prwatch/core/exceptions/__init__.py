from prwatch.core.exceptions.errors import (
    AUTH_REQUIRED_MESSAGE,
    AlertDeliveryError,
    ParseError,
    ProcessLaunchError,
    PRWatchError,
    QueueError,
    QueueFullError,
    StateError,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
    describe_error,
)

__all__ = [
    "AUTH_REQUIRED_MESSAGE",
    "PRWatchError",
    "ToolError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolTimeoutError",
    "ProcessLaunchError",
    "ParseError",
    "StateError",
    "QueueError",
    "QueueFullError",
    "AlertDeliveryError",
    "describe_error",
]
