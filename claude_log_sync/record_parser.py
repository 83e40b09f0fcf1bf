"""
Tolerant parsing of Claude Code JSONL session records.

Each non-blank line of a session file is an independent JSON record. Only
"user" and "assistant" records carry conversation text; everything else
(summaries, tool results, system events) is ignored. A corrupt line never
aborts parsing of the rest of the file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import ConversationTurn, Role
from .noise_filter import is_noise

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _human_text(record: Dict[str, Any]) -> Any:
    message = record.get("message")
    if isinstance(message, dict) and message.get("content"):
        return message["content"]
    return record.get("content") or ""


def _timestamp(record: Dict[str, Any]) -> str:
    timestamp = record.get("timestamp")
    return timestamp if isinstance(timestamp, str) else ""


def _parse_human(record: Dict[str, Any]) -> Optional[ConversationTurn]:
    text = _human_text(record)

    # Tool results arrive as user records with a list of blocks
    if not isinstance(text, str):
        return None

    if is_noise(text):
        return None

    text = text.strip()
    if not text:
        return None

    return ConversationTurn(
        role=Role.HUMAN,
        text=text,
        timestamp=_timestamp(record),
    )


def _parse_agent(record: Dict[str, Any]) -> Optional[ConversationTurn]:
    message = record.get("message")
    if not isinstance(message, dict):
        return None

    blocks = message.get("content")
    if not isinstance(blocks, list):
        return None

    texts = [
        block["text"]
        for block in blocks
        if isinstance(block, dict)
        and block.get("type") == "text"
        and isinstance(block.get("text"), str)
        and not is_noise(block["text"])
    ]
    if not texts:
        return None

    text = "\n\n".join(texts).strip()
    if not text:
        return None

    return ConversationTurn(
        role=Role.AGENT,
        text=text,
        timestamp=_timestamp(record),
    )


_RECORD_PARSERS = {
    Role.HUMAN.value: _parse_human,
    Role.AGENT.value: _parse_agent,
}


def parse_record_line(line: str) -> Optional[ConversationTurn]:
    """
    Parse one JSONL line into a conversation turn.

    Args:
        line: Raw line from a session file

    Returns:
        The turn, or None for malformed, unrecognized or noise records
    """
    try:
        record = json.loads(line)
    except (json.JSONDecodeError, TypeError):
        return None

    if not isinstance(record, dict):
        return None

    record_type = record.get("type")
    if not isinstance(record_type, str):
        return None

    parser = _RECORD_PARSERS.get(record_type)
    if parser is None:
        return None
    return parser(record)


def parse_session_file(file_path: PathLike) -> List[ConversationTurn]:
    """Parse every record of a session file, in file order."""
    try:
        content = Path(file_path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Could not read session file {file_path}: {e}")
        return []

    turns = []
    for line in content.split("\n"):
        if not line.strip():
            continue
        turn = parse_record_line(line)
        if turn is not None:
            turns.append(turn)

    logger.debug(f"Parsed {len(turns)} turns from {file_path}")
    return turns


def count_content_lines(file_path: PathLike) -> int:
    """Count the non-blank lines of a session file."""
    content = Path(file_path).read_text(encoding="utf-8", errors="replace")
    return sum(1 for line in content.split("\n") if line.strip())


def extract_project_name(session_path: PathLike) -> str:
    """
    Readable project name from a session's encoded project directory.

    Claude Code names project directories after the working directory with
    separators replaced by dashes, e.g. ``-Users-alice-code-my-app``. The
    leading home-directory parts are dropped: ``code-my-app``.
    """
    project_dir = Path(session_path).parent.name
    parts = [part for part in project_dir.split("-") if part]

    start_index = 0
    for i, part in enumerate(parts):
        if part.lower() == "users" or i < 2:
            start_index = i + 1
        else:
            break

    project_parts = parts[start_index:]
    if not project_parts:
        return "default"
    return "-".join(project_parts).lower()
