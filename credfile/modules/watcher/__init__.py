"""
Watcher Module - Black Box Interface

Purpose: Report changes to individual files
Interface: WatcherService.watch_file(), unwatch(), start(), stop()
Hidden: watchdog observers, directory scheduling, event filtering

Can be replaced with any notifier that calls back with the changed path.
"""

from .service import FileChangeHandler, FileWatch, WatcherService

__all__ = ["WatcherService", "FileWatch", "FileChangeHandler"]
