"""
File watcher service.

Wraps a watchdog observer. A single observer thread delivers events for
every watched file, one at a time.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch

logger = logging.getLogger(__name__)

CHANGE_EVENT_TYPES = {
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
}


class FileChangeHandler(FileSystemEventHandler):
    """Forwards change events for one file to a callback."""

    def __init__(self, path: Path, callback: Callable[[str], object]):
        super().__init__()
        self.path = str(path)
        self.callback = callback

    def _event_paths(self, event: FileSystemEvent):
        paths = [event.src_path]
        # A rename onto the file reports the file as the destination
        dest_path = getattr(event, "dest_path", None)
        if dest_path:
            paths.append(dest_path)
        return [os.path.abspath(os.fsdecode(p)) for p in paths]

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in CHANGE_EVENT_TYPES:
            return

        if self.path not in self._event_paths(event):
            return

        logger.debug(f"File {event.event_type}: {self.path}")
        try:
            self.callback(self.path)
        except Exception:
            logger.exception(f"Error handling change of {self.path}")


@dataclass
class FileWatch:
    """Handle returned by WatcherService.watch_file()."""

    path: Path
    handler: FileChangeHandler
    watch: ObservedWatch


class WatcherService:
    """Watches files through their parent directories."""

    def __init__(self, observer: Optional[BaseObserver] = None):
        """
        Initialize watcher service.

        Args:
            observer: watchdog observer, the platform default if omitted
        """
        self.observer = observer if observer is not None else Observer()
        self.running = False

    def watch_file(self, path: Union[str, Path], callback: Callable[[str], object]) -> FileWatch:
        """
        Deliver create, modify, delete and move events for a file.

        Args:
            path: File to watch; its parent directory must exist
            callback: Called with the absolute file path on every change

        Returns:
            FileWatch handle for unwatch()

        Raises:
            OSError: If the parent directory cannot be watched
        """
        path = Path(path).absolute()
        handler = FileChangeHandler(path, callback)
        watch = self.observer.schedule(handler, str(path.parent), recursive=False)
        logger.info(f"Watching {path} for changes")
        return FileWatch(path=path, handler=handler, watch=watch)

    def unwatch(self, file_watch: FileWatch) -> None:
        """Stop delivering events for a watched file."""
        try:
            self.observer.remove_handler_for_watch(file_watch.handler, file_watch.watch)
        except KeyError:
            logger.debug(f"Watch for {file_watch.path} already removed")
            return
        logger.info(f"Stopped watching {file_watch.path}")

    def start(self) -> None:
        """Start the observer thread."""
        if self.running:
            logger.warning("Watcher service already running")
            return
        self.observer.start()
        self.running = True
        logger.info("Watcher service started")

    def stop(self) -> None:
        """Stop the observer thread and wait for it."""
        if not self.running:
            return
        self.observer.stop()
        self.observer.join()
        self.running = False
        logger.info("Watcher service stopped")

    def __enter__(self) -> "WatcherService":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
