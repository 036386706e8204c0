"""Unit tests for cms_backend.credentials — CredentialStore."""

import logging

import pytest

from cms_backend.credentials import CredentialStore, hash_password
from cms_backend.errors import CredentialsFileError


@pytest.fixture
def users_file(tmp_path):
    path = tmp_path / "users.yml"
    path.write_text(
        f"admin: {hash_password('secret', rounds=4)}\n"
        f"editor: {hash_password('pa55word', rounds=4)}\n",
        encoding="utf-8",
    )
    return path


class TestCredentialStore:
    def test_load(self, users_file):
        users = CredentialStore(users_file).load()
        assert set(users) == {"admin", "editor"}
        assert users["admin"].startswith("$2b$")

    def test_verify_correct_password(self, users_file):
        store = CredentialStore(users_file)
        assert store.verify("admin", "secret")
        assert store.verify("editor", "pa55word")

    def test_verify_wrong_password(self, users_file):
        assert not CredentialStore(users_file).verify("admin", "invalid")

    def test_verify_unknown_user(self, users_file):
        assert not CredentialStore(users_file).verify("nobody", "secret")

    def test_verify_other_users_password(self, users_file):
        assert not CredentialStore(users_file).verify("admin", "pa55word")

    def test_file_reread_on_each_check(self, users_file):
        store = CredentialStore(users_file)
        assert not store.verify("new", "pw")
        with users_file.open("a", encoding="utf-8") as f:
            f.write(f"new: {hash_password('pw', rounds=4)}\n")
        assert store.verify("new", "pw")

    def test_malformed_hash_is_rejected(self, tmp_path, caplog):
        path = tmp_path / "users.yml"
        path.write_text("admin: not-a-hash\n", encoding="utf-8")
        with caplog.at_level(logging.ERROR, logger="mdcms.credentials"):
            assert not CredentialStore(path).verify("admin", "secret")
        assert caplog.records

    def test_failed_sign_in_does_not_log_password(self, users_file, caplog):
        with caplog.at_level(logging.WARNING, logger="mdcms.credentials"):
            CredentialStore(users_file).verify("admin", "hunter2")
        assert "hunter2" not in caplog.text
        assert "admin" in caplog.text


class TestCredentialsFileErrors:
    def test_missing_file(self, tmp_path):
        store = CredentialStore(tmp_path / "missing.yml")
        with pytest.raises(CredentialsFileError):
            store.load()
        assert not store.verify("admin", "secret")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "users.yml"
        path.write_text("- admin\n- editor\n", encoding="utf-8")
        with pytest.raises(CredentialsFileError):
            CredentialStore(path).load()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "users.yml"
        path.write_text("admin: [unclosed\n", encoding="utf-8")
        with pytest.raises(CredentialsFileError):
            CredentialStore(path).load()

    def test_empty_file_means_no_users(self, tmp_path):
        path = tmp_path / "users.yml"
        path.write_text("", encoding="utf-8")
        store = CredentialStore(path)
        assert store.load() == {}
        assert not store.verify("admin", "secret")


def test_shipped_users_file_accepts_admin():
    from cms_backend.config import PROJECT_ROOT

    assert CredentialStore(PROJECT_ROOT / "test" / "users.yml").verify("admin", "secret")
