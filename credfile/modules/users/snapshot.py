"""
Immutable credential snapshots.

A snapshot is built once and never changed afterwards. The store replaces
its snapshot wholesale, so readers holding a reference always see one
consistent set of users.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional

from .errors import DuplicateUsernameError


@dataclass(frozen=True)
class CredentialEntry:
    """One ``username:hash`` line of the users file."""

    username: str
    hash: str


class CredentialSnapshot(Mapping[str, str]):
    """Read-only mapping of username to stored hash."""

    __slots__ = ("_users", "digest")

    def __init__(self, users: Mapping[str, str], digest: Optional[str] = None):
        self._users = MappingProxyType(dict(users))
        # SHA-256 of the file content this snapshot was parsed from, if any
        self.digest = digest

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[CredentialEntry],
        path=None,
        digest: Optional[str] = None,
    ) -> "CredentialSnapshot":
        """
        Build a snapshot, refusing duplicate usernames.

        Args:
            entries: Entries in file order
            path: Source file, used in the error message
            digest: Content digest of the source file

        Raises:
            DuplicateUsernameError: If a username occurs twice
        """
        users = {}
        for entry in entries:
            if entry.username in users:
                raise DuplicateUsernameError(
                    f"duplicate username [{entry.username}] in users file [{path}]",
                    username=entry.username,
                    path=path,
                )
            users[entry.username] = entry.hash
        return cls(users, digest=digest)

    @classmethod
    def empty(cls, digest: Optional[str] = None) -> "CredentialSnapshot":
        return cls({}, digest=digest)

    def entries(self) -> List[CredentialEntry]:
        return [CredentialEntry(username, hash) for username, hash in self._users.items()]

    def __getitem__(self, username: str) -> str:
        return self._users[username]

    def __iter__(self) -> Iterator[str]:
        return iter(self._users)

    def __len__(self) -> int:
        return len(self._users)

    def __repr__(self) -> str:
        # Never print hashes
        return f"CredentialSnapshot(users={sorted(self._users)})"
