from prwatch.core.preview.builder import (
    build_preview_details,
    failed_workflows,
    recent_mentions,
    top_changed_files,
)
from prwatch.core.preview.cache import PreviewCache
from prwatch.core.preview.focus import CLEAR_DELAY_SECONDS, FocusTracker

__all__ = [
    "CLEAR_DELAY_SECONDS",
    "FocusTracker",
    "PreviewCache",
    "build_preview_details",
    "failed_workflows",
    "recent_mentions",
    "top_changed_files",
]
