"""
Markdown rendering of a day's conversation.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from .models import ConversationTurn, Role

ROLE_LABELS: Dict[Role, str] = {
    Role.HUMAN: "**ユーザー**",
    Role.AGENT: "**Claude**",
}


def format_document_date(day: date) -> str:
    """Locale date used for the document name and heading, e.g. 2026年10月18日."""
    return f"{day.year}年{day.month}月{day.day}日"


@dataclass
class RenderStyle:
    """Labels and headings of the rendered document."""
    role_labels: Dict[Role, str] = field(default_factory=lambda: dict(ROLE_LABELS))
    heading_suffix: str = "Claudeとの会話"

    def format_date(self, day: date) -> str:
        return format_document_date(day)

    def heading(self, day: date) -> str:
        return f"# {self.format_date(day)} {self.heading_suffix}"


def _turn_date(timestamp: str) -> Optional[date]:
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


def filter_today(turns: Iterable[ConversationTurn], today: date) -> List[ConversationTurn]:
    """
    Keep the turns that belong to ``today`` in local time.

    Turns without a usable timestamp cannot be placed on a day and are kept.
    """
    kept = []
    for turn in turns:
        if not turn.timestamp:
            kept.append(turn)
            continue
        turn_date = _turn_date(turn.timestamp)
        if turn_date is None or turn_date == today:
            kept.append(turn)
    return kept


def render_turns(turns: Iterable[ConversationTurn], style: Optional[RenderStyle] = None) -> str:
    style = style or RenderStyle()
    lines = []
    for turn in turns:
        lines.append(f"{style.role_labels[turn.role]}: {turn.text}")
        lines.append("")
    return "\n".join(lines)


def render_document(
    turns: Iterable[ConversationTurn], day: date, style: Optional[RenderStyle] = None
) -> str:
    """Full document for one day: heading followed by every turn in order."""
    style = style or RenderStyle()
    return f"{style.heading(day)}\n\n{render_turns(turns, style)}"
