from prwatch.core.mute.auto_unmute import AutoUnmuteReconciler, UnmutePolicy, qualifies
from prwatch.core.mute.manager import MuteManager

__all__ = ["AutoUnmuteReconciler", "MuteManager", "UnmutePolicy", "qualifies"]
