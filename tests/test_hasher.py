"""
Tests for the password hashers.
"""

import base64
import hashlib

import bcrypt
import pytest

from credfile.modules.hasher import BcryptHasher, HtpasswdHasher, get_hasher


class TestBcryptHasher:
    """Test BcryptHasher."""

    def setup_method(self):
        """Use the cheapest cost factor to keep tests fast."""
        self.hasher = BcryptHasher(rounds=4)

    def test_generate_and_verify(self):
        hashed = self.hasher.generate("s3cret")

        assert hashed.startswith("$2b$04$")
        assert self.hasher.verify("s3cret", hashed) is True
        assert self.hasher.verify("wrong", hashed) is False

    def test_salted(self):
        """The same password never hashes to the same value twice."""
        assert self.hasher.generate("s3cret") != self.hasher.generate("s3cret")

    def test_malformed_hash(self):
        """A hash bcrypt cannot read is a failed check, not an error."""
        assert self.hasher.verify("s3cret", "not-a-bcrypt-hash") is False


class TestHtpasswdHasher:
    """Test HtpasswdHasher format detection."""

    def setup_method(self):
        self.hasher = HtpasswdHasher(rounds=4)

    def test_bcrypt(self):
        hashed = bcrypt.hashpw(b"s3cret", bcrypt.gensalt(rounds=4)).decode("utf-8")

        assert self.hasher.verify("s3cret", hashed) is True
        assert self.hasher.verify("wrong", hashed) is False

    def test_bcrypt_2y(self):
        """Apache's $2y$ prefix is accepted."""
        hashed = bcrypt.hashpw(b"s3cret", bcrypt.gensalt(rounds=4)).decode("utf-8")
        apache_hash = "$2y$" + hashed[4:]

        assert self.hasher.verify("s3cret", apache_hash) is True

    def test_sha1(self):
        digest = base64.b64encode(hashlib.sha1(b"s3cret").digest()).decode("ascii")

        assert self.hasher.verify("s3cret", "{SHA}" + digest) is True
        assert self.hasher.verify("wrong", "{SHA}" + digest) is False

    def test_plain_text(self):
        assert self.hasher.verify("s3cret", "s3cret") is True
        assert self.hasher.verify("s3cret", "s3cret2") is False

    @pytest.mark.parametrize(
        "stored",
        [
            "$apr1$r31.....$HqJZimcKQFAMYayBlzkrA/",
            "$6$saltsalt$abcdefghijklmnopqrstuvwxyz",
            "$5$saltsalt$abcdefghijklmnopqrstuvwxyz",
            "$2x$10$abcdefghijklmnopqrstuu",
        ],
    )
    def test_unsupported_crypt_formats_never_match(self, stored):
        """An unsupported hash is not compared as plain text."""
        assert self.hasher.verify(stored, stored) is False
        assert self.hasher.verify("s3cret", stored) is False

    def test_generate_is_bcrypt(self):
        hashed = self.hasher.generate("s3cret")

        assert hashed.startswith("$2b$")
        assert self.hasher.verify("s3cret", hashed) is True


def test_get_hasher():
    assert isinstance(get_hasher("bcrypt"), BcryptHasher)
    assert isinstance(get_hasher("HTPASSWD"), HtpasswdHasher)


def test_get_hasher_unknown():
    with pytest.raises(ValueError) as exc_info:
        get_hasher("md5")

    assert "Unknown hasher" in str(exc_info.value)
