from prwatch.config.settings import (
    DEFAULT_GH_PATHS,
    GhSettings,
    LoggingSettings,
    Settings,
    StateSettings,
    WorkerSettings,
    load_settings,
)

__all__ = [
    'Settings',
    'GhSettings',
    'LoggingSettings',
    'WorkerSettings',
    'StateSettings',
    'DEFAULT_GH_PATHS',
    'load_settings',
]
