"""
Password hashers for the users file.

Hashes are stored as text in the users file, so every hasher takes and
returns ``str`` and encodes internally.
"""

import base64
import hashlib
import logging
import secrets
from typing import Dict, Protocol, Type

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
SHA1_PREFIX = "{SHA}"
CRYPT_PREFIX = "$"


class Hasher(Protocol):
    """Protocol for password hashers - allows swappable implementations."""

    def verify(self, password: str, hash: str) -> bool:
        """
        Check a candidate password against a stored hash.

        Args:
            password: Candidate password in plain text
            hash: Stored hash from the users file

        Returns:
            True if the password matches the hash
        """
        ...

    def generate(self, password: str) -> str:
        """
        Hash a password for storage.

        Args:
            password: Password in plain text

        Returns:
            Hash suitable for the users file
        """
        ...


class BcryptHasher:
    """bcrypt-only hasher."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def verify(self, password: str, hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hash.encode("utf-8"))
        except ValueError:
            # Raised by bcrypt for anything that is not a bcrypt hash
            logger.debug("Stored hash is not a valid bcrypt hash")
            return False

    def generate(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("utf-8")


class HtpasswdHasher:
    """
    Hasher accepting the formats produced by ``htpasswd``.

    The format is detected from the hash prefix:
    - ``$2a$``, ``$2b$``, ``$2y$``: bcrypt
    - ``{SHA}``: base64 encoded SHA-1
    - any other ``$``-prefixed crypt format (``$apr1$``, ``$5$``, ``$6$``...):
      unsupported, never matches
    - anything else: plain text

    New hashes are always bcrypt.
    """

    def __init__(self, rounds: int = 10):
        self._bcrypt = BcryptHasher(rounds=rounds)

    def verify(self, password: str, hash: str) -> bool:
        if hash.startswith(CRYPT_PREFIX) and not hash.startswith(BCRYPT_PREFIXES):
            logger.debug(f"Unsupported hash format '{hash.split(CRYPT_PREFIX)[1][:8]}', rejecting")
            return False

        if hash.startswith(BCRYPT_PREFIXES):
            # bcrypt only understands the $2a$/$2b$ variants
            if hash.startswith("$2y$"):
                hash = "$2b$" + hash[4:]
            return self._bcrypt.verify(password, hash)

        if hash.startswith(SHA1_PREFIX):
            digest = hashlib.sha1(password.encode("utf-8")).digest()
            expected = base64.b64encode(digest).decode("ascii")
            return secrets.compare_digest(expected, hash[len(SHA1_PREFIX):])

        return secrets.compare_digest(password.encode("utf-8"), hash.encode("utf-8"))

    def generate(self, password: str) -> str:
        return self._bcrypt.generate(password)


HASHERS: Dict[str, Type] = {
    "bcrypt": BcryptHasher,
    "htpasswd": HtpasswdHasher,
}


def get_hasher(name: str) -> Hasher:
    """
    Build a hasher by name.

    Args:
        name: One of the keys of ``HASHERS``

    Returns:
        Hasher instance

    Raises:
        ValueError: If the name is unknown
    """
    try:
        hasher_cls = HASHERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown hasher '{name}'. Available: {', '.join(sorted(HASHERS))}"
        ) from None
    return hasher_cls()
