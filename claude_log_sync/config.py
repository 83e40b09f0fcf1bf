"""
Runtime configuration for a sync invocation.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .scan_index import default_index_path
from .session_discovery import default_projects_dir
from .sync_orchestrator import MAX_SESSIONS_PER_RUN


@dataclass
class SyncConfig:
    """Settings resolved from the command line."""
    output_path: Path
    claude_project_path: Optional[Path] = None
    auto_git_commit: bool = True
    watch: bool = False
    verbose: bool = False
    session_limit: int = MAX_SESSIONS_PER_RUN
    index_path: Path = field(default_factory=default_index_path)
    watch_cooldown: float = 5.0

    @property
    def projects_dir(self) -> Path:
        return self.claude_project_path or default_projects_dir()
