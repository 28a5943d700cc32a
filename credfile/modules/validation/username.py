"""Username rules for the users file."""

import re
from typing import Optional, Protocol

MIN_USERNAME_LENGTH = 1
MAX_USERNAME_LENGTH = 30

USERNAME_PATTERN = re.compile(r"[a-zA-Z_][a-zA-Z0-9_@\-$.]{0,29}")

INVALID_USERNAME_MESSAGE = (
    f"a valid username must be at least {MIN_USERNAME_LENGTH} character and no longer "
    f"than {MAX_USERNAME_LENGTH} characters. It must begin with a letter (`a-z` or `A-Z`) "
    "or an underscore (`_`). Subsequent characters can be letters, underscores (`_`), "
    "digits (`0-9`) or any of the following symbols `@`, `-`, `.` or `$`"
)


class UsernameValidator(Protocol):
    """Protocol for username validators."""

    def __call__(self, username: str) -> Optional[str]:
        """
        Validate a username.

        Returns:
            None if the username is valid, otherwise the reason it is not
        """
        ...


def validate_username(username: str) -> Optional[str]:
    """
    Validate a username against the default rules.

    Args:
        username: Username as read from the users file (already trimmed)

    Returns:
        None if valid, otherwise a human-readable reason

    Example:
        >>> validate_username("alice") is None
        True
        >>> validate_username("1alice") is None
        False
    """
    if USERNAME_PATTERN.fullmatch(username):
        return None
    return INVALID_USERNAME_MESSAGE
