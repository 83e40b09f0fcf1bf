"""
Git commit of synced documents.
"""

import logging
import subprocess
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GitCommitter:
    """Stages and commits a single file in the repository at repo_dir."""

    def __init__(self, git_executable: str = "git"):
        self.git_executable = git_executable

    def commit(self, repo_dir: PathLike, file_path: PathLike, message: str) -> None:
        """
        Raises:
            subprocess.CalledProcessError: git failed, e.g. nothing to commit
            OSError: git could not be run
        """
        for args in (["add", str(file_path)], ["commit", "-m", message]):
            subprocess.run(
                [self.git_executable, *args],
                cwd=str(repo_dir),
                check=True,
                capture_output=True,
                text=True,
            )
        logger.info(f"Committed {file_path}: {message}")


class NullCommitter(GitCommitter):
    """Committer that does nothing, used when git commits are disabled."""

    def commit(self, repo_dir: PathLike, file_path: PathLike, message: str) -> None:
        logger.debug(f"Git commit disabled, not committing {file_path}")
