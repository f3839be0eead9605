"""Filesystem watch mode with per-file debouncing.

Uses watchdog to monitor the schema and functions files and re-parse them
when they change.
"""
from __future__ import annotations
import logging
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from db_viewer.web.context import ViewerContext

logger = logging.getLogger(__name__)


class _WatchdogHandler(FileSystemEventHandler):
    """Forwards events on watched files to the watcher."""

    def __init__(self, watcher: SourceWatcher):
        self.watcher = watcher

    def on_modified(self, event: FileSystemEvent):
        if not event.is_directory:
            self.watcher.notify(event.src_path)

    def on_created(self, event: FileSystemEvent):
        if not event.is_directory:
            self.watcher.notify(event.src_path)

    def on_moved(self, event: FileSystemEvent):
        # Editors that save via rename land here
        if not event.is_directory:
            self.watcher.notify(event.dest_path)


class SourceWatcher:
    """Re-parses the viewer's files after they settle."""

    def __init__(
        self,
        context: ViewerContext,
        debounce_seconds: float = 0.5,
        on_reload: Callable[[Path], None] | None = None,
    ):
        """Initialize watcher.

        Args:
            context: Context whose files are watched and reloaded
            debounce_seconds: Quiet period before a changed file is re-parsed
            on_reload: Callback run instead of `context.reload_path`
        """
        self.context = context
        self.debounce_seconds = debounce_seconds
        self.on_reload = on_reload or context.reload_path

        self.watched_files = {
            Path(p).resolve()
            for p in (context.schema_path, context.functions_path)
            if p
        }

        self.observer = None
        self._timers: dict[Path, threading.Timer] = {}
        self._lock = threading.Lock()

    def notify(self, path: str | Path) -> None:
        """Record a change; restarts the file's debounce timer."""
        resolved = Path(path).resolve()
        if resolved not in self.watched_files:
            return

        logger.debug(f"File changed: {resolved}")
        with self._lock:
            pending = self._timers.pop(resolved, None)
            if pending is not None:
                pending.cancel()
            timer = threading.Timer(self.debounce_seconds, self._fire, args=(resolved,))
            timer.daemon = True
            self._timers[resolved] = timer
            timer.start()

    def _fire(self, path: Path) -> None:
        with self._lock:
            self._timers.pop(path, None)
        logger.info(f"Reloading {path}")
        self.on_reload(path)

    def start(self) -> None:
        """Start watching the parent directories of the files."""
        if not self.watched_files:
            logger.warning("No files to watch")
            return

        handler = _WatchdogHandler(self)
        self.observer = Observer()
        for directory in sorted({p.parent for p in self.watched_files}):
            self.observer.schedule(handler, str(directory), recursive=False)
            logger.info(f"Watching {directory}")
        self.observer.start()

    def stop(self) -> None:
        """Stop watching and drop pending reloads."""
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()

        if self.observer:
            self.observer.stop()
            self.observer.join()
            self.observer = None
