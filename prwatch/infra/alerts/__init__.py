from prwatch.infra.alerts.log_sink import LoggingAlertSink

__all__ = ["LoggingAlertSink"]
