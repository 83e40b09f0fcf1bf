"""
Administrative noise in Claude Code logs.

Slash-command echoes, system reminders and task notifications are written
into the log as ordinary user/assistant text. They are not part of the
conversation and are dropped before rendering.
"""

import re
from typing import Pattern, Tuple

NOISE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"<local-command", re.IGNORECASE),
    re.compile(r"<command-name>", re.IGNORECASE),
    re.compile(r"<system-reminder>", re.IGNORECASE),
    re.compile(r"<task-notification>", re.IGNORECASE),
    re.compile(r"^No response requested", re.IGNORECASE),
)


def is_noise(text: str) -> bool:
    """Return True if the text matches any noise pattern."""
    return any(pattern.search(text) for pattern in NOISE_PATTERNS)
