"""
Discovery of Claude Code session files worth syncing.

Walks the projects directory and compares every session file against the
fingerprint recorded by the previous pass. Only files that changed, were
modified recently and are not trivially small become candidates, so repeated
invocations skip stale sessions without reading them.
"""

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .models import ClaudeSession, FileFingerprint, ScanIndex
from .record_parser import extract_project_name, parse_session_file
from .scan_index import ScanIndexStore

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SESSION_EXTENSION = ".jsonl"
RECENT_WINDOW_SECONDS = 60 * 60
MIN_SESSION_BYTES = 1000
EXCLUDED_DIRS = ("subagents",)


def default_projects_dir() -> Path:
    return Path.home() / ".claude" / "projects"


class SessionDiscovery:
    """Finds changed, recent session files using a persisted scan index."""

    def __init__(
        self,
        index_store: ScanIndexStore,
        clock: Callable[[], float] = time.time,
        recent_window_seconds: int = RECENT_WINDOW_SECONDS,
        min_size_bytes: int = MIN_SESSION_BYTES,
        excluded_dirs: Iterable[str] = EXCLUDED_DIRS,
        extension: str = SESSION_EXTENSION,
    ):
        self.index_store = index_store
        self.clock = clock
        self.recent_window_seconds = recent_window_seconds
        self.min_size_bytes = min_size_bytes
        self.excluded_dirs = frozenset(excluded_dirs)
        self.extension = extension

    def find_session_files(self, root: Optional[PathLike] = None) -> List[Path]:
        """
        Discover candidate session files under root, newest first.

        The scan index is rewritten on every pass from what is on disk,
        whether or not any candidates were found.

        Args:
            root: Directory to walk, ~/.claude/projects by default

        Returns:
            Paths of changed, recent, non-trivial session files
        """
        projects_dir = Path(root).expanduser().absolute() if root else default_projects_dir()
        if not projects_dir.is_dir():
            logger.info(f"Claude projects directory not found: {projects_dir}")
            return []

        previous = self.index_store.load()
        scan_ms = int(self.clock() * 1000)
        current = ScanIndex(last_scan=scan_ms)
        candidates: List[Tuple[int, Path]] = []

        self._search_dir(projects_dir, previous, current, scan_ms, candidates)

        self.index_store.save(current)

        candidates.sort(key=lambda item: item[0], reverse=True)
        logger.debug(
            f"Scanned {len(current.files)} session files, {len(candidates)} candidates"
        )
        return [path for _, path in candidates]

    def _search_dir(
        self,
        directory: Path,
        previous: ScanIndex,
        current: ScanIndex,
        scan_ms: int,
        candidates: List[Tuple[int, Path]],
    ) -> None:
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {directory}: {e}")
            return

        for entry in entries:
            if entry.name in self.excluded_dirs:
                continue

            fingerprint = self._fingerprint(entry)
            if fingerprint is None:
                if entry.is_dir() and not entry.is_symlink():
                    self._search_dir(entry, previous, current, scan_ms, candidates)
                continue

            key = str(entry)
            current.files[key] = fingerprint

            if self._is_candidate(fingerprint, previous.get(key), scan_ms):
                candidates.append((fingerprint.mtime_ms, entry))

    def _fingerprint(self, entry: Path) -> Optional[FileFingerprint]:
        """Fingerprint of a session file, None for anything else."""
        if not entry.name.endswith(self.extension):
            return None
        try:
            if not entry.is_file():
                return None
            stats = entry.stat()
        except OSError as e:
            logger.debug(f"Could not stat {entry}: {e}")
            return None
        return FileFingerprint(mtime_ms=stats.st_mtime_ns // 1_000_000, size=stats.st_size)

    def _is_candidate(
        self,
        fingerprint: FileFingerprint,
        cached: Optional[FileFingerprint],
        scan_ms: int,
    ) -> bool:
        has_changed = cached != fingerprint
        is_recent = fingerprint.mtime_ms > scan_ms - self.recent_window_seconds * 1000
        is_substantial = fingerprint.size > self.min_size_bytes
        return has_changed and is_recent and is_substantial

    def get_recent_sessions(
        self, root: Optional[PathLike] = None, limit: int = 5
    ) -> List[ClaudeSession]:
        """Parse the newest candidate sessions that contain any turns."""
        sessions = []
        for file_path in self.find_session_files(root)[:limit]:
            turns = parse_session_file(file_path)
            if not turns:
                continue
            try:
                last_modified = datetime.fromtimestamp(file_path.stat().st_mtime)
            except OSError as e:
                logger.debug(f"Session {file_path} vanished after discovery: {e}")
                continue
            sessions.append(ClaudeSession(
                file_path=str(file_path),
                project_name=extract_project_name(file_path),
                turns=turns,
                last_modified=last_modified,
            ))
        return sessions
