from prwatch.core.jobs.base import BaseJob
from prwatch.core.jobs.alerts import AlertJob
from prwatch.core.jobs.refresh import RefreshJob

__all__ = [
    'BaseJob',
    'AlertJob',
    'RefreshJob',
]
