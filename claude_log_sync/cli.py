"""
Command line entry point: claude-log-sync <output-path> [options]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .config import SyncConfig
from .git_committer import GitCommitter, NullCommitter
from .record_parser import extract_project_name
from .scan_index import FileScanIndexStore
from .session_discovery import SessionDiscovery
from .sync_orchestrator import SyncOrchestrator
from .sync_state import FileSyncStateStore
from .watcher import SessionWatcher

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True)
error_console = Console(stderr=True, soft_wrap=True)

EPILOG = """\
examples:
  claude-log-sync ~/logs/claude
  claude-log-sync -o ~/logs/claude -p ~/.claude/projects/my-project
  claude-log-sync ~/logs/claude --no-git
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claude-log-sync",
        description="Export Claude Code conversations to Markdown",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "output_path", nargs="?", help="Path to output directory for markdown files"
    )
    parser.add_argument(
        "-o", "--output", dest="output", help="Output directory for markdown files"
    )
    parser.add_argument(
        "-p", "--project", help="Path to specific Claude Code project directory"
    )
    parser.add_argument(
        "--no-git", action="store_true", help="Disable automatic git commit after sync"
    )
    parser.add_argument(
        "-w", "--watch", action="store_true", help="Keep running and sync on every log change"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> SyncConfig:
    """Resolve command line arguments; exits with status 1 without an output path."""
    parser = build_parser()
    args = parser.parse_args(argv)

    output_path = args.output or args.output_path
    if not output_path:
        error_console.print("[red]Error: Output path is required")
        parser.print_help()
        sys.exit(1)

    return SyncConfig(
        output_path=Path(output_path).expanduser(),
        claude_project_path=Path(args.project).expanduser() if args.project else None,
        auto_git_commit=not args.no_git,
        watch=args.watch,
        verbose=args.verbose,
    )


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def run_once(config: SyncConfig, discovery: SessionDiscovery, orchestrator: SyncOrchestrator) -> int:
    """Discover and sync sessions once; returns the number of messages synced."""
    console.print("[blue]Searching for Claude sessions...")

    session_files = discovery.find_session_files(config.projects_dir)
    if not session_files:
        console.print("[yellow]No active Claude sessions found")
        return 0

    console.print(f"[green]Found {len(session_files)} session(s)")

    summary = orchestrator.sync_sessions(
        session_files,
        config.output_path,
        config.auto_git_commit,
        limit=config.session_limit,
    )

    for session_path, error in summary.failures.items():
        error_console.print(
            f"[red]✗ Failed to sync {escape(extract_project_name(session_path))}: {escape(error)}"
        )
    for file_path in summary.synced_paths:
        console.print(f"[green]Synced: {escape(file_path)}")

    if summary.total_messages > 0:
        console.print(
            f"[green]Done: Synced {summary.total_messages} messages "
            f"from {summary.synced_files} session(s)"
        )
    else:
        console.print("No new messages to sync")
    return summary.total_messages


def main(argv: Optional[List[str]] = None) -> int:
    config = parse_args(argv)
    setup_logging(config.verbose)

    discovery = SessionDiscovery(FileScanIndexStore(config.index_path))
    orchestrator = SyncOrchestrator(
        state_store=FileSyncStateStore(),
        committer=GitCommitter() if config.auto_git_commit else NullCommitter(),
    )

    if config.watch:
        watcher = SessionWatcher(
            config.projects_dir,
            lambda: run_once(config, discovery, orchestrator),
            cooldown=config.watch_cooldown,
        )
        try:
            watcher.run()
        except KeyboardInterrupt:
            watcher.stop()
            console.print("Stopping sync watcher...")
        return 0

    run_once(config, discovery, orchestrator)
    return 0


if __name__ == "__main__":
    sys.exit(main())
