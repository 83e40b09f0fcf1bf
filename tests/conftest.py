"""Shared fixtures for building Claude Code session logs."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import pytest

TODAY = datetime(2026, 10, 18, 15, 30)


def user_record(text: str, timestamp: str = "2026-10-18T10:00:00") -> Dict[str, Any]:
    return {
        "type": "user",
        "timestamp": timestamp,
        "message": {"role": "user", "content": text},
    }


def assistant_record(texts: List[str], timestamp: str = "2026-10-18T10:00:05") -> Dict[str, Any]:
    return {
        "type": "assistant",
        "timestamp": timestamp,
        "message": {
            "role": "assistant",
            "content": [{"type": "text", "text": text} for text in texts],
        },
    }


@pytest.fixture
def make_record():
    """Factories for user and assistant JSONL records."""
    return {"user": user_record, "assistant": assistant_record}


@pytest.fixture
def write_session():
    """Write records as a JSONL session file, one record per line."""
    def _write(path: Path, records: List[Any], padding: int = 0) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = [r if isinstance(r, str) else json.dumps(r, ensure_ascii=False) for r in records]
        if padding:
            lines.append(json.dumps({"type": "summary", "summary": "x" * padding}))
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def fixed_clock():
    return lambda: TODAY
