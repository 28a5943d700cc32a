"""Errors raised by the users store."""

from pathlib import Path
from typing import Optional, Union


class CredentialStoreError(Exception):
    """Base error for the users store."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class FatalLoadError(CredentialStoreError):
    """The users file exists but could not be read."""


class FatalParseError(CredentialStoreError):
    """The users file was read but would produce an inconsistent snapshot."""


class DuplicateUsernameError(FatalParseError):
    """The same username appears on more than one line."""

    def __init__(self, message: str, username: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message, path)
        self.username = username


class WriteError(CredentialStoreError):
    """The users file could not be written."""
