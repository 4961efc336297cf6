from prwatch.infra.github.cli import GhCommandRunner
from prwatch.infra.github.gh_source import GhCliSource

__all__ = ["GhCommandRunner", "GhCliSource"]
