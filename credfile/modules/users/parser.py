"""
Users file parser.

Turns the content of a users file into a CredentialSnapshot. Bad lines are
skipped with a warning; anything that would make the snapshot inconsistent
fails the whole parse.
"""

import hashlib
import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

from ..validation import validate_username
from .errors import DuplicateUsernameError, FatalLoadError
from .snapshot import CredentialEntry, CredentialSnapshot

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"
SEPARATOR = ":"


class LineStatus(Enum):
    """Result of parsing a single line."""

    VALID = "valid"
    COMMENT = "comment"
    MALFORMED = "malformed"
    INVALID_USERNAME = "invalid_username"


@dataclass(frozen=True)
class ValidationOutcome:
    """Per-line parse result."""

    line_number: int
    status: LineStatus
    entry: Optional[CredentialEntry] = None
    reason: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.status is LineStatus.VALID


def parse_line(
    line: str,
    line_number: int,
    validator: Callable[[str], Optional[str]] = validate_username,
) -> ValidationOutcome:
    """
    Classify one line of the users file.

    Args:
        line: Line without its trailing newline
        line_number: 1-based line number
        validator: Username validator returning None or a reason

    Returns:
        ValidationOutcome for the line
    """
    if line.startswith(COMMENT_PREFIX):
        return ValidationOutcome(line_number, LineStatus.COMMENT)

    username, sep, hash = line.partition(SEPARATOR)
    if not sep:
        return ValidationOutcome(line_number, LineStatus.MALFORMED, reason="missing ':' separator")

    username = username.strip()
    hash = hash.strip()
    if not username:
        return ValidationOutcome(line_number, LineStatus.MALFORMED, reason="empty username")
    if not hash:
        return ValidationOutcome(line_number, LineStatus.MALFORMED, reason="empty password hash")

    error = validator(username)
    if error is not None:
        return ValidationOutcome(
            line_number,
            LineStatus.INVALID_USERNAME,
            entry=CredentialEntry(username, hash),
            reason=error,
        )

    return ValidationOutcome(line_number, LineStatus.VALID, entry=CredentialEntry(username, hash))


def iter_outcomes(
    lines: Iterable[str],
    validator: Callable[[str], Optional[str]] = validate_username,
) -> Iterator[ValidationOutcome]:
    """Yield a ValidationOutcome for every line, numbering from 1."""
    for line_number, line in enumerate(lines, start=1):
        yield parse_line(line, line_number, validator)


def parse_lines(
    lines: Iterable[str],
    path: Union[str, Path] = "<memory>",
    validator: Callable[[str], Optional[str]] = validate_username,
    digest: Optional[str] = None,
) -> CredentialSnapshot:
    """
    Build a snapshot from users file lines.

    Args:
        lines: Lines of the file, without trailing newlines
        path: Source path, used in log and error messages
        validator: Username validator
        digest: Content digest stored on the snapshot

    Returns:
        CredentialSnapshot with every valid line

    Raises:
        DuplicateUsernameError: If a username appears on two lines
    """
    entries: List[CredentialEntry] = []
    first_seen: Dict[str, int] = {}

    for outcome in iter_outcomes(lines, validator):
        if outcome.status is LineStatus.COMMENT:
            continue

        if outcome.status is LineStatus.MALFORMED:
            logger.warning(
                f"invalid entry in users file [{path}], line [{outcome.line_number}] "
                f"({outcome.reason}). skipping..."
            )
            continue

        if outcome.status is LineStatus.INVALID_USERNAME:
            logger.warning(
                f"invalid username [{outcome.entry.username}] in users file [{path}], "
                f"line [{outcome.line_number}], skipping... ({outcome.reason})"
            )
            continue

        username = outcome.entry.username
        if username in first_seen:
            raise DuplicateUsernameError(
                f"duplicate username [{username}] in users file [{path}] "
                f"(lines [{first_seen[username]}] and [{outcome.line_number}])",
                username=username,
                path=path,
            )
        first_seen[username] = outcome.line_number
        entries.append(outcome.entry)

    snapshot = CredentialSnapshot.from_entries(entries, path=path, digest=digest)
    if not snapshot:
        logger.warning(
            f"no users found in users file [{path}]. "
            "add users to the file to enable authentication"
        )
    return snapshot


def read_file(path: Union[str, Path]) -> Optional[bytes]:
    """
    Read the raw users file.

    Returns:
        File content, or None if the file does not exist

    Raises:
        FatalLoadError: If the file exists but cannot be read
    """
    path = Path(path).absolute()
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise FatalLoadError(f"could not read users file [{path}]", path) from e


def split_lines(text: str) -> List[str]:
    """Split on \\n, \\r and \\r\\n only; other control characters stay in the line."""
    return [line.rstrip("\n") for line in io.StringIO(text, newline=None)]


def content_digest(content: Optional[bytes]) -> Optional[str]:
    """SHA-256 of the file content, None for a missing file."""
    if content is None:
        return None
    return hashlib.sha256(content).hexdigest()


def parse_content(
    content: Optional[bytes],
    path: Union[str, Path],
    validator: Callable[[str], Optional[str]] = validate_username,
) -> CredentialSnapshot:
    """
    Parse raw file content as returned by read_file.

    Raises:
        FatalLoadError: If the content is not valid UTF-8
        DuplicateUsernameError: If a username appears on two lines
    """
    if content is None:
        logger.debug(f"users file [{path}] does not exist, no users loaded")
        return CredentialSnapshot.empty()

    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FatalLoadError(f"could not read users file [{path}]", path) from e

    return parse_lines(split_lines(text), path, validator, digest=content_digest(content))


def parse_file(
    path: Union[str, Path],
    validator: Callable[[str], Optional[str]] = validate_username,
) -> CredentialSnapshot:
    """
    Parse the users file. Never returns a partial snapshot.

    Args:
        path: Users file location
        validator: Username validator

    Returns:
        CredentialSnapshot; empty if the file does not exist

    Raises:
        FatalLoadError: If the file exists but cannot be read
        DuplicateUsernameError: If a username appears on two lines
    """
    path = Path(path).absolute()
    logger.debug(f"reading users file located at [{path}]")
    return parse_content(read_file(path), path, validator)
