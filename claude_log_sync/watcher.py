"""
Watch mode: re-run the sync whenever a session log changes.

The watchdog observer thread only flags that something changed; syncing
itself stays on the calling thread, one run at a time.
"""

import logging
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .session_discovery import SESSION_EXTENSION

logger = logging.getLogger(__name__)


class SessionChangeHandler(FileSystemEventHandler):
    """Flags changes to session log files."""

    def __init__(self, changed: threading.Event, extension: str = SESSION_EXTENSION):
        self.changed = changed
        self.extension = extension

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if str(event.src_path).endswith(self.extension):
            self.changed.set()


class SessionWatcher:
    """Runs ``run_sync`` once up front and again after each burst of log writes."""

    def __init__(
        self,
        projects_dir: Path,
        run_sync: Callable[[], None],
        cooldown: float = 5.0,
    ):
        self.projects_dir = projects_dir
        self.run_sync = run_sync
        self.cooldown = cooldown
        self.changed = threading.Event()
        self.stopped = threading.Event()

    def stop(self) -> None:
        self.stopped.set()
        self.changed.set()

    def run(self) -> None:
        self.run_sync()

        if not self.projects_dir.is_dir():
            logger.warning(f"Claude projects directory not found: {self.projects_dir}")
            return

        observer = Observer()
        observer.schedule(SessionChangeHandler(self.changed), str(self.projects_dir), recursive=True)
        observer.start()
        logger.info(f"Watching {self.projects_dir} for session changes")

        try:
            while not self.stopped.is_set():
                self.changed.wait()
                if self.stopped.is_set():
                    break
                # Let a burst of appends settle before syncing
                self.stopped.wait(self.cooldown)
                self.changed.clear()
                if not self.stopped.is_set():
                    self.run_sync()
        finally:
            observer.stop()
            observer.join()
