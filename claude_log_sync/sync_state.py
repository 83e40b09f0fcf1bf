"""
Per-output-directory sync watermarks.

Each output directory keeps a small JSON file recording, for every session
file synced into it, the non-blank line count at the last successful sync.
The file is read and rewritten whole without locking; concurrent syncs into
the same output directory are unsafe and the last writer wins.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Union

from .models import SyncState

logger = logging.getLogger(__name__)

STATE_FILE = ".claude-sync-state.json"

PathLike = Union[str, Path]


class SyncStateStore(ABC):
    """Load/save interface for sync watermarks, scoped per output directory."""

    @abstractmethod
    def load(self, output_dir: PathLike) -> SyncState:
        pass

    @abstractmethod
    def save(self, output_dir: PathLike, state: SyncState) -> None:
        pass


class FileSyncStateStore(SyncStateStore):
    """Watermarks stored as JSON inside each output directory."""

    def state_file_path(self, output_dir: PathLike) -> Path:
        return Path(output_dir) / STATE_FILE

    def load(self, output_dir: PathLike) -> SyncState:
        """Load watermarks; a missing or corrupt file means nothing synced yet."""
        state_file = self.state_file_path(output_dir)
        if not state_file.exists():
            return SyncState()

        try:
            with open(state_file, "r", encoding="utf-8") as f:
                return SyncState.from_dict(json.load(f))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable sync state {state_file}: {e}")
            return SyncState()

    def save(self, output_dir: PathLike, state: SyncState) -> None:
        state_file = self.state_file_path(output_dir)
        try:
            with open(state_file, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save sync state {state_file}: {e}")


class InMemorySyncStateStore(SyncStateStore):
    """Watermarks kept in process memory, keyed by output directory."""

    def __init__(self):
        self.states: Dict[str, Dict[str, int]] = {}

    def load(self, output_dir: PathLike) -> SyncState:
        return SyncState(last_synced_lines=dict(self.states.get(str(output_dir), {})))

    def save(self, output_dir: PathLike, state: SyncState) -> None:
        self.states[str(output_dir)] = dict(state.last_synced_lines)
