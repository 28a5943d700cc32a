"""
Reload controller for the users file.

Every change notification for the users file goes through here: re-parse,
publish the new snapshot, notify listeners. Failures keep the current
snapshot.
"""

import logging
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from ..validation import validate_username
from .errors import CredentialStoreError
from .listeners import ListenerRegistry
from .parser import content_digest, parse_content, read_file
from .snapshot import CredentialSnapshot

logger = logging.getLogger(__name__)


class ReloadState(Enum):
    """Reload controller states."""

    IDLE = "idle"
    RELOADING = "reloading"


class ReloadController:
    """
    Serializes reloads of one users file.

    An event whose file content is byte-for-byte the content of the published
    snapshot is skipped: no publish and no listener notification. Watchers
    often report several events for a single write.
    """

    def __init__(
        self,
        path: Union[str, Path],
        current: Callable[[], CredentialSnapshot],
        publish: Callable[[CredentialSnapshot], None],
        registry: ListenerRegistry,
        validator: Callable[[str], Optional[str]] = validate_username,
    ):
        """
        Initialize reload controller.

        Args:
            path: Users file to reload
            current: Returns the currently published snapshot
            publish: Replaces the published snapshot
            registry: Listeners notified after a successful reload
            validator: Username validator handed to the parser
        """
        self.path = Path(path).absolute()
        self._current = current
        self._publish = publish
        self._registry = registry
        self._validator = validator
        self._lock = threading.Lock()
        self.state = ReloadState.IDLE
        self.reload_count = 0
        self.failure_count = 0

    def is_watched_path(self, event_path: Union[str, Path]) -> bool:
        """True if the event path is the users file itself."""
        return os.path.abspath(os.fspath(event_path)) == str(self.path)

    def on_file_event(self, event_path: Union[str, Path]) -> bool:
        """
        Handle a change notification for a file in the watched directory.

        Args:
            event_path: Path reported by the watcher

        Returns:
            True if a new snapshot was published
        """
        if not self.is_watched_path(event_path):
            return False
        return self.reload()

    def reload(self) -> bool:
        """
        Re-read the users file and publish it if it parses.

        Returns:
            True if a new snapshot was published
        """
        with self._lock:
            self.state = ReloadState.RELOADING
            try:
                return self._reload()
            finally:
                self.state = ReloadState.IDLE

    def _reload(self) -> bool:
        try:
            content = read_file(self.path)
            digest = content_digest(content)
            if digest == self._current().digest:
                logger.debug(f"users file [{self.path}] unchanged, skipping reload")
                return False
            snapshot = parse_content(content, self.path, self._validator)
        except CredentialStoreError as e:
            self.failure_count += 1
            logger.error(
                f"failed to parse users file [{self.path}]. current users remain unmodified: {e}",
                exc_info=True,
            )
            return False
        except Exception:
            self.failure_count += 1
            logger.exception(
                f"failed to parse users file [{self.path}]. current users remain unmodified"
            )
            return False

        self._publish(snapshot)
        self.reload_count += 1
        logger.info(f"updated users (users file [{self.path}] changed, {len(snapshot)} users)")

        try:
            self._registry.notify_refresh()
        except Exception:
            logger.exception(f"refresh listener failed after reloading users file [{self.path}]")

        return True
