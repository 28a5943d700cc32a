"""
File-backed users store.

Holds the current CredentialSnapshot and answers password checks against
it. The snapshot is replaced, never modified, so verification takes no lock
and never waits for a reload.
"""

import logging
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Union

from ..hasher import Hasher, HtpasswdHasher
from ..validation import validate_username
from .listeners import ListenerRegistry, RefreshListener
from .parser import parse_file
from .reload import ReloadController
from .snapshot import CredentialSnapshot
from .writer import write_file

logger = logging.getLogger(__name__)

USERS_FILE_SETTING = "files.users"
DEFAULT_USERS_FILE_NAME = "users"


class FileUserPasswdStore:
    """
    Users store backed by a ``username:hash`` file.

    The file is parsed once on construction. When a watcher service is given,
    changes to the file are picked up by the reload controller and the
    listeners are notified after each successful reload.
    """

    parse_file = staticmethod(parse_file)
    write_file = staticmethod(write_file)

    def __init__(
        self,
        path: Union[str, Path],
        hasher: Optional[Hasher] = None,
        validator: Callable[[str], Optional[str]] = validate_username,
        listener: Optional[RefreshListener] = None,
        watcher_service: Optional[Any] = None,
        owns_watcher_service: bool = False,
    ):
        """
        Initialize users store.

        Args:
            path: Users file location
            hasher: Password hasher (htpasswd formats by default)
            validator: Username validator used when parsing
            listener: Optional refresh listener registered up front
            watcher_service: Optional WatcherService delivering file events
            owns_watcher_service: Stop the watcher service on close()

        Raises:
            FatalLoadError: If the users file exists but cannot be read
            FatalParseError: If the users file contains duplicate usernames
        """
        self.path = Path(path).absolute()
        self.hasher = hasher or HtpasswdHasher()

        self._snapshot: CredentialSnapshot = parse_file(self.path, validator)
        if not self._snapshot:
            logger.debug(f"users file [{self.path}] has no users")

        self._listeners = ListenerRegistry()
        if listener is not None:
            self._listeners.add(listener)

        self.reload_controller = ReloadController(
            self.path,
            current=lambda: self._snapshot,
            publish=self._publish,
            registry=self._listeners,
            validator=validator,
        )

        self._watcher_service = watcher_service
        self._owns_watcher_service = owns_watcher_service and watcher_service is not None
        self._watch = None
        if watcher_service is not None:
            try:
                self._watch = watcher_service.watch_file(
                    self.path, self.reload_controller.on_file_event
                )
            except OSError as e:
                # Typically the config directory does not exist yet
                logger.warning(
                    f"could not watch users file [{self.path}], changes will not be picked up "
                    f"until reload() is called: {e}"
                )

    @staticmethod
    def resolve_file(settings: Mapping[str, Any], config_dir: Union[str, Path]) -> Path:
        """
        Find the users file from settings.

        Args:
            settings: Flat settings mapping, ``files.users`` overrides the location
            config_dir: Directory holding the default ``users`` file

        Returns:
            Users file path
        """
        location = settings.get(USERS_FILE_SETTING)
        if location is None:
            return Path(config_dir) / DEFAULT_USERS_FILE_NAME
        return Path(location)

    def _publish(self, snapshot: CredentialSnapshot) -> None:
        self._snapshot = snapshot

    @property
    def snapshot(self) -> CredentialSnapshot:
        """Currently published snapshot."""
        return self._snapshot

    def verify_password(self, username: str, password: str) -> bool:
        """
        Check a password for a user.

        Unknown users and wrong passwords both return False. Hasher errors
        are logged and treated as a failed check.

        Args:
            username: Username to check
            password: Candidate password

        Returns:
            True if the user exists and the password matches
        """
        stored_hash = self._snapshot.get(username)
        if stored_hash is None:
            return False
        try:
            return bool(self.hasher.verify(password, stored_hash))
        except Exception:
            logger.exception(f"password verification failed for user [{username}]")
            return False

    def user_exists(self, username: str) -> bool:
        return username in self._snapshot

    def usernames(self) -> List[str]:
        return sorted(self._snapshot)

    def add_listener(self, listener: RefreshListener) -> None:
        self._listeners.add(listener)

    def reload(self) -> bool:
        """Reload the users file now; same path as a change notification."""
        return self.reload_controller.reload()

    def close(self) -> None:
        """Release the watcher subscription, and the watcher service if owned."""
        if self._watch is not None:
            self._watcher_service.unwatch(self._watch)
            self._watch = None
        if self._owns_watcher_service:
            self._watcher_service.stop()
            self._owns_watcher_service = False

    def __len__(self) -> int:
        return len(self._snapshot)

    def __enter__(self) -> "FileUserPasswdStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
