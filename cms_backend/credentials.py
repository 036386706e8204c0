from __future__ import annotations

import logging
from pathlib import Path

import bcrypt
import yaml
from pydantic import TypeAdapter, ValidationError

from .errors import CredentialsFileError

logger = logging.getLogger("mdcms.credentials")

_USERS_ADAPTER = TypeAdapter(dict[str, str])

# Checked against for unknown usernames so that path still pays for a bcrypt check.
_DUMMY_HASH = bcrypt.hashpw(b"mdcms-dummy-password", bcrypt.gensalt(rounds=4))


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password for users.yml."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def _checkpw(password: str, hashed: bytes) -> bool:
    # bcrypt raises ValueError for malformed hashes and, in recent releases, for
    # passwords longer than 72 bytes.
    try:
        return bcrypt.checkpw((password or "").encode("utf-8"), hashed)
    except ValueError:
        logger.error("Password check failed on a malformed hash or oversized password")
        return False


class CredentialStore:
    """username -> bcrypt hash mapping kept in a YAML file.

    The file is re-read on every check so edits apply without a restart.
    """

    def __init__(self, users_path: Path):
        self.users_path = Path(users_path)

    def load(self) -> dict[str, str]:
        try:
            with self.users_path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise CredentialsFileError(f"Users file not found: {self.users_path}")
        except yaml.YAMLError as e:
            raise CredentialsFileError(f"Users file is not valid YAML: {e}")

        try:
            return _USERS_ADAPTER.validate_python(raw)
        except ValidationError as e:
            raise CredentialsFileError(f"Users file must map usernames to hashes: {e}")

    def verify(self, username: str, password: str) -> bool:
        try:
            users = self.load()
        except CredentialsFileError as e:
            logger.error("Cannot check credentials: %s", e)
            return False

        stored = users.get(username or "")
        if stored is None:
            _checkpw(password, _DUMMY_HASH)
            logger.warning("Sign-in failed for unknown user %r", username)
            return False

        ok = _checkpw(password, stored.encode("utf-8"))

        if not ok:
            logger.warning("Sign-in failed for %r", username)
        return ok
