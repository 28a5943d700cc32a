"""
Users Module - Black Box Interface

Purpose: Serve password checks from a users file that may change at any time
Interface: FileUserPasswdStore.verify_password(), add_listener(), parse_file(), write_file()
Hidden: Snapshot publishing, reload serialization, atomic file replacement

Readers never lock; reloads replace the whole snapshot in one step.
"""

from .errors import (
    CredentialStoreError,
    DuplicateUsernameError,
    FatalLoadError,
    FatalParseError,
    WriteError,
)
from .listeners import ListenerRegistry
from .parser import LineStatus, ValidationOutcome, parse_file, parse_lines
from .reload import ReloadController, ReloadState
from .snapshot import CredentialEntry, CredentialSnapshot
from .store import FileUserPasswdStore
from .writer import write_file

__all__ = [
    "FileUserPasswdStore",
    "CredentialEntry",
    "CredentialSnapshot",
    "ListenerRegistry",
    "ReloadController",
    "ReloadState",
    "LineStatus",
    "ValidationOutcome",
    "parse_file",
    "parse_lines",
    "write_file",
    "CredentialStoreError",
    "FatalLoadError",
    "FatalParseError",
    "DuplicateUsernameError",
    "WriteError",
]
