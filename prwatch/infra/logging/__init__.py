from prwatch.infra.logging.console import ConsoleLogger
from prwatch.infra.logging.logfire import LogfireLogger, configure_logfire

__all__ = ["ConsoleLogger", "LogfireLogger", "configure_logfire"]
