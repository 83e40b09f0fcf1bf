"""
Data model shared by discovery, parsing and sync.

Includes the JSON shapes of the two persisted state files: the global scan
index and the per-output-directory sync state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(Enum):
    """Speaker of a conversation turn, valued by its JSONL ``type``."""
    HUMAN = "user"
    AGENT = "assistant"


@dataclass(frozen=True)
class ConversationTurn:
    """One textual exchange unit extracted from a session log."""
    role: Role
    text: str
    timestamp: str = ""


@dataclass(frozen=True)
class FileFingerprint:
    """Last observed physical state of a session file."""
    mtime_ms: int
    size: int

    def to_dict(self) -> Dict[str, int]:
        return {"mtime": self.mtime_ms, "size": self.size}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileFingerprint":
        return cls(mtime_ms=int(data["mtime"]), size=int(data["size"]))


@dataclass
class ScanIndex:
    """Fingerprints of every session file seen by the last discovery pass."""
    files: Dict[str, FileFingerprint] = field(default_factory=dict)
    last_scan: int = 0

    def get(self, path: str) -> Optional[FileFingerprint]:
        return self.files.get(path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": {path: fp.to_dict() for path, fp in self.files.items()},
            "lastScan": self.last_scan,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanIndex":
        files = {
            path: FileFingerprint.from_dict(entry)
            for path, entry in data.get("files", {}).items()
        }
        return cls(files=files, last_scan=int(data.get("lastScan", 0)))


@dataclass
class SyncState:
    """
    Last synced non-blank line count per session file.

    Counts only move forward; ``advance`` ignores a lower value.
    """
    last_synced_lines: Dict[str, int] = field(default_factory=dict)

    def last_synced(self, session_path: str) -> int:
        return self.last_synced_lines.get(session_path, 0)

    def advance(self, session_path: str, line_count: int) -> None:
        if line_count > self.last_synced(session_path):
            self.last_synced_lines[session_path] = line_count

    def to_dict(self) -> Dict[str, Any]:
        return {"lastSyncedLines": dict(self.last_synced_lines)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SyncState":
        lines = {
            path: int(count)
            for path, count in data.get("lastSyncedLines", {}).items()
        }
        return cls(last_synced_lines=lines)


@dataclass
class SyncResult:
    """Outcome of syncing one session into an output directory."""
    success: bool
    file_path: str
    messages_added: int
    error: Optional[str] = None


@dataclass
class SyncSummary:
    """Totals for one invocation across all synced sessions."""
    total_messages: int = 0
    synced_files: int = 0
    synced_paths: List[str] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)


@dataclass
class ClaudeSession:
    """A discovered session with its parsed turns."""
    file_path: str
    project_name: str
    turns: List[ConversationTurn]
    last_modified: datetime
