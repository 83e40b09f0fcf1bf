"""
Sync of parsed sessions into a daily Markdown document.

A session is re-rendered whenever its non-blank line count has grown past
the watermark stored for it in the output directory. The line count is only
a coarse "something changed" signal, so the whole of today's document is
rebuilt from the complete turn list rather than appended to. Edits or
deletions made upstream between syncs therefore show up as silent changes
to the day's document.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from .day_renderer import RenderStyle, filter_today, render_document
from .git_committer import GitCommitter, NullCommitter
from .models import ConversationTurn, SyncResult, SyncSummary
from .record_parser import count_content_lines, parse_session_file
from .sync_state import FileSyncStateStore, SyncStateStore

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

MAX_SESSIONS_PER_RUN = 3


class SyncOrchestrator:
    """Decides whether a session has new content and rewrites today's document."""

    def __init__(
        self,
        state_store: Optional[SyncStateStore] = None,
        committer: Optional[GitCommitter] = None,
        style: Optional[RenderStyle] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.state_store = state_store or FileSyncStateStore()
        self.committer = committer or NullCommitter()
        self.style = style or RenderStyle()
        self.clock = clock

    def sync_to_output(
        self,
        session_path: PathLike,
        turns: List[ConversationTurn],
        output_dir: PathLike,
        auto_git_commit: bool,
    ) -> SyncResult:
        """
        Sync one session's turns into today's document.

        Args:
            session_path: Session file the turns were parsed from
            turns: Every turn parsed from the session, in file order
            output_dir: Directory holding the documents and sync state
            auto_git_commit: Commit the document after writing it

        Returns:
            SyncResult; failures are reported, never raised
        """
        try:
            output_path = Path(output_dir)
            output_path.mkdir(parents=True, exist_ok=True)

            today = self.clock().date()
            today_turns = filter_today(turns, today)
            if not today_turns:
                return SyncResult(success=True, file_path="", messages_added=0)

            session_key = str(session_path)
            state = self.state_store.load(output_path)
            last_synced = state.last_synced(session_key)
            current_line_count = count_content_lines(session_path)

            if current_line_count <= last_synced:
                logger.debug(f"No new lines in {session_key} ({current_line_count} synced)")
                return SyncResult(success=True, file_path="", messages_added=0)

            date_label = self.style.format_date(today)
            document_path = output_path / f"{date_label}.md"
            document_path.write_text(
                render_document(today_turns, today, self.style), encoding="utf-8"
            )

            state.advance(session_key, current_line_count)
            self.state_store.save(output_path, state)
            logger.info(
                f"Rendered {len(today_turns)} turns from {session_key} into {document_path}"
            )
        except Exception as e:
            logger.error(f"Failed to sync {session_path}: {e}")
            return SyncResult(success=False, file_path="", messages_added=0, error=str(e))

        if auto_git_commit:
            self._commit(output_path, document_path, f"Claude: {date_label} (auto)")

        return SyncResult(
            success=True, file_path=str(document_path), messages_added=len(today_turns)
        )

    def _commit(self, output_dir: Path, document_path: Path, message: str) -> None:
        try:
            self.committer.commit(output_dir, document_path, message)
        except Exception as e:
            # Nothing to commit or not a git repository
            logger.debug(f"Git commit skipped for {document_path}: {e}")

    def sync_sessions(
        self,
        session_paths: Iterable[PathLike],
        output_dir: PathLike,
        auto_git_commit: bool,
        parser: Callable[[PathLike], List[ConversationTurn]] = parse_session_file,
        limit: int = MAX_SESSIONS_PER_RUN,
    ) -> SyncSummary:
        """Sync at most ``limit`` sessions one after another."""
        summary = SyncSummary()
        for session_path in list(session_paths)[:limit]:
            result = self.sync_to_output(
                session_path, parser(session_path), output_dir, auto_git_commit
            )
            if not result.success:
                summary.failures[str(session_path)] = result.error or "Unknown error"
                continue
            if result.messages_added > 0:
                summary.total_messages += result.messages_added
                summary.synced_files += 1
                summary.synced_paths.append(result.file_path)
        return summary
