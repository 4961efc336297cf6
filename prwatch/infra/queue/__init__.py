from prwatch.infra.queue.memory import MemoryQueue

__all__ = ["MemoryQueue"]
