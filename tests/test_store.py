"""
Tests for FileUserPasswdStore.
"""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from credfile.modules.hasher import HtpasswdHasher
from credfile.modules.users import (
    DuplicateUsernameError,
    FatalLoadError,
    FileUserPasswdStore,
)


class TestVerifyPassword:
    """Test verify_password."""

    def test_unknown_user(self, write_users, plain_hasher):
        """Unknown users never verify."""
        store = FileUserPasswdStore(write_users("alice:plain:pw\n"), hasher=plain_hasher)

        assert store.verify_password("mallory", "pw") is False
        assert store.verify_password("mallory", "") is False

    def test_known_user(self, write_users, plain_hasher):
        store = FileUserPasswdStore(write_users("alice:plain:pw\n"), hasher=plain_hasher)

        assert store.verify_password("alice", "pw") is True
        assert store.verify_password("alice", "nope") is False

    def test_delegates_to_hasher(self, write_users):
        """The result is exactly what the hasher says for the stored hash."""
        hasher = MagicMock()
        hasher.verify.return_value = True
        store = FileUserPasswdStore(write_users("alice:stored-hash\n"), hasher=hasher)

        assert store.verify_password("alice", "candidate") is True
        hasher.verify.assert_called_once_with("candidate", "stored-hash")

        hasher.verify.return_value = False
        assert store.verify_password("alice", "candidate") is False

    def test_hasher_not_called_for_unknown_user(self, write_users):
        hasher = MagicMock()
        store = FileUserPasswdStore(write_users("alice:stored-hash\n"), hasher=hasher)

        store.verify_password("bob", "candidate")

        hasher.verify.assert_not_called()

    def test_hasher_fault_is_false(self, write_users, caplog):
        """Hasher exceptions never reach the caller."""
        hasher = MagicMock()
        hasher.verify.side_effect = RuntimeError("broken hasher")
        store = FileUserPasswdStore(write_users("alice:stored-hash\n"), hasher=hasher)

        with caplog.at_level(logging.ERROR, logger="credfile"):
            assert store.verify_password("alice", "candidate") is False

        assert "password verification failed for user [alice]" in caplog.text

    def test_stored_hash_is_not_a_password(self, write_users):
        """Knowing an unsupported stored hash does not let anyone log in."""
        apr1 = "$apr1$r31.....$HqJZimcKQFAMYayBlzkrA/"
        sha512 = "$6$saltsalt$abcdefghijklmnopqrstuvwxyz"
        store = FileUserPasswdStore(write_users(f"alice:{apr1}\nbob:{sha512}\n"))

        assert store.verify_password("alice", apr1) is False
        assert store.verify_password("bob", sha512) is False

    def test_default_hasher(self, write_users):
        """htpasswd formats are understood by default."""
        store = FileUserPasswdStore(write_users("alice:plainpw\n"))

        assert isinstance(store.hasher, HtpasswdHasher)
        assert store.verify_password("alice", "plainpw") is True


class TestConstruction:
    """Test store construction and lifecycle."""

    def test_missing_file(self, users_path):
        """A fresh realm without a users file starts empty."""
        store = FileUserPasswdStore(users_path)

        assert len(store) == 0
        assert store.usernames() == []

    def test_unreadable_file_aborts(self, users_path):
        users_path.mkdir()

        with pytest.raises(FatalLoadError):
            FileUserPasswdStore(users_path)

    def test_duplicate_aborts(self, write_users):
        with pytest.raises(DuplicateUsernameError):
            FileUserPasswdStore(write_users("alice:h1\nalice:h2\n"))

    def test_read_helpers(self, write_users):
        store = FileUserPasswdStore(write_users("bob:h2\nalice:h1\n"))

        assert store.usernames() == ["alice", "bob"]
        assert store.user_exists("alice") is True
        assert store.user_exists("carol") is False
        assert store.snapshot == {"alice": "h1", "bob": "h2"}

    def test_initial_listener_registered(self, write_users, listener):
        path = write_users("alice:h1\n")
        store = FileUserPasswdStore(path, listener=listener)

        path.write_text("alice:h2\n", encoding="utf-8")
        store.reload()

        assert listener.count == 1

    def test_subscribes_and_releases_watcher(self, write_users):
        """The store watches its file and releases the watch on close."""
        watcher_service = MagicMock()
        path = write_users("alice:h1\n")

        with FileUserPasswdStore(path, watcher_service=watcher_service) as store:
            watcher_service.watch_file.assert_called_once_with(
                path, store.reload_controller.on_file_event
            )

        watcher_service.unwatch.assert_called_once_with(watcher_service.watch_file.return_value)

        store.close()
        assert watcher_service.unwatch.call_count == 1

    def test_unwatchable_directory_is_not_fatal(self, tmp_path, caplog):
        """A store for a directory that does not exist yet starts empty."""
        watcher_service = MagicMock()
        watcher_service.watch_file.side_effect = FileNotFoundError(2, "No such file or directory")
        path = tmp_path / "not-yet" / "users"

        with caplog.at_level(logging.WARNING, logger="credfile"):
            store = FileUserPasswdStore(path, watcher_service=watcher_service)

        assert len(store) == 0
        assert "could not watch users file" in caplog.text

        store.close()
        watcher_service.unwatch.assert_not_called()

    def test_close_without_watcher(self, write_users):
        store = FileUserPasswdStore(write_users("alice:h1\n"))

        store.close()


class TestResolveFile:
    """Test users file resolution from settings."""

    def test_default_location(self, tmp_path):
        assert FileUserPasswdStore.resolve_file({}, tmp_path) == tmp_path / "users"

    def test_override(self, tmp_path):
        settings = {"files.users": "/srv/auth/users"}

        assert FileUserPasswdStore.resolve_file(settings, tmp_path) == Path("/srv/auth/users")
