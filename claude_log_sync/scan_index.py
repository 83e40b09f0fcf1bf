"""
Persistent change-detection index for session discovery.

Maps each session file path to the (mtime, size) fingerprint observed by the
previous discovery pass. The index is rebuilt from scratch on every pass and
written back whole, so there is no locking: two concurrent runs sharing an
index file simply race and the last writer wins.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .models import ScanIndex

logger = logging.getLogger(__name__)

INDEX_FILE = ".claude-scan-index.json"


def default_index_path() -> Path:
    return Path.home() / ".claude" / INDEX_FILE


class ScanIndexStore(ABC):
    """Load/save interface for the scan index."""

    @abstractmethod
    def load(self) -> ScanIndex:
        pass

    @abstractmethod
    def save(self, index: ScanIndex) -> None:
        pass


class FileScanIndexStore(ScanIndexStore):
    """Scan index stored as JSON at a fixed per-user location."""

    def __init__(self, index_path: Optional[Path] = None):
        self.index_path = index_path or default_index_path()

    def load(self) -> ScanIndex:
        """Load the index; a missing or corrupt file is an empty index."""
        if not self.index_path.exists():
            return ScanIndex()

        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                return ScanIndex.from_dict(json.load(f))
        except (OSError, ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable scan index {self.index_path}: {e}")
            return ScanIndex()

    def save(self, index: ScanIndex) -> None:
        index.last_scan = int(time.time() * 1000)
        try:
            self.index_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.index_path, "w", encoding="utf-8") as f:
                json.dump(index.to_dict(), f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save scan index {self.index_path}: {e}")


class InMemoryScanIndexStore(ScanIndexStore):
    """Scan index kept in process memory."""

    def __init__(self, index: Optional[ScanIndex] = None):
        self.index = index or ScanIndex()

    def load(self) -> ScanIndex:
        return ScanIndex(files=dict(self.index.files), last_scan=self.index.last_scan)

    def save(self, index: ScanIndex) -> None:
        self.index = ScanIndex(files=dict(index.files), last_scan=index.last_scan)
