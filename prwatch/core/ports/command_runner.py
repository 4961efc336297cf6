from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class CommandRunner(Protocol):
    def run(self, args: Sequence[str]) -> bytes:
        ...
