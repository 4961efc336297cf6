AUTH_REQUIRED_MESSAGE = "GitHub authentication required. Run 'gh auth login' in Terminal."
_AUTH_MARKERS = ("gh auth", "401")


class PRWatchError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def describe(self) -> str:
        return self.message


class ToolError(PRWatchError):
    pass


class ToolNotFoundError(ToolError):
    def __init__(self, message: str, searched_paths: tuple[str, ...] = ()) -> None:
        self.searched_paths = searched_paths
        super().__init__(message)


class ToolExecutionError(ToolError):
    def __init__(self, message: str, exit_code: int | None = None) -> None:
        self.exit_code = exit_code
        super().__init__(message)

    @property
    def is_auth_failure(self) -> bool:
        return any(marker in self.message for marker in _AUTH_MARKERS)

    def describe(self) -> str:
        if self.is_auth_failure:
            return AUTH_REQUIRED_MESSAGE
        return f"GitHub CLI error: {self.message}"


class ToolTimeoutError(ToolExecutionError):
    def __init__(self, message: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(message)


class ProcessLaunchError(ToolError):
    def describe(self) -> str:
        return f"Process error: {self.message}"


class ParseError(PRWatchError):
    def describe(self) -> str:
        return f"Parse error: {self.message}"


class StateError(PRWatchError):
    pass


class QueueError(PRWatchError):
    pass


class QueueFullError(QueueError):
    pass


class AlertDeliveryError(PRWatchError):
    pass


def describe_error(error: Exception) -> str:
    if isinstance(error, PRWatchError):
        return error.describe()
    return str(error)
