from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field


# cms_backend/ -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

TEMPLATES_DIR = PROJECT_ROOT / "templates"

SESSION_COOKIE_NAME = "mdcms_session"


class Settings(BaseModel):
    """Everything the app needs from the outside world, resolved once at startup."""

    environment: str = "production"
    data_dir: Path
    users_path: Path
    session_secret: str = Field(min_length=16)
    session_cookie: str = SESSION_COOKIE_NAME
    # None keeps the cookie for the browser session only.
    session_max_age: Optional[int] = None
    log_level: str = "INFO"


def _env_paths(environment: str) -> tuple[Path, Path]:
    if environment == "test":
        return PROJECT_ROOT / "test" / "data", PROJECT_ROOT / "test" / "users.yml"
    return PROJECT_ROOT / "data", PROJECT_ROOT / "users.yml"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    MDCMS_ENV=test switches both the storage directory and the users file to the
    test/ tree. MDCMS_DATA_DIR / MDCMS_USERS_FILE override either path explicitly.
    """
    env = os.environ if environ is None else environ

    environment = (env.get("MDCMS_ENV") or "production").strip().lower()
    data_dir, users_path = _env_paths(environment)

    data_raw = env.get("MDCMS_DATA_DIR")
    if data_raw and data_raw.strip():
        data_dir = Path(data_raw)
    users_raw = env.get("MDCMS_USERS_FILE")
    if users_raw and users_raw.strip():
        users_path = Path(users_raw)

    # A fresh secret per process means sessions do not survive a restart.
    secret = env.get("MDCMS_SESSION_SECRET") or secrets.token_hex(32)

    max_age_raw = env.get("MDCMS_SESSION_MAX_AGE")
    max_age = int(max_age_raw) if max_age_raw and max_age_raw.strip() else None

    return Settings(
        environment=environment,
        data_dir=data_dir.resolve(),
        users_path=users_path.resolve(),
        session_secret=secret,
        session_max_age=max_age,
        log_level=env.get("MDCMS_LOG_LEVEL", "INFO"),
    )
