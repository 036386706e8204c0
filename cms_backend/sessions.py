from __future__ import annotations

from typing import Any, MutableMapping, Optional

from fastapi import Request

from .errors import AuthRequired

USERNAME_KEY = "username"
MESSAGE_KEY = "message"


class Session:
    """Per-request view over the signed session cookie.

    Starlette's SessionMiddleware owns the cookie: it verifies the signature on the
    way in (a tampered cookie yields an empty session) and re-signs whatever is left
    in the mapping on the way out.
    """

    def __init__(self, data: MutableMapping[str, Any]):
        self._data = data

    def get_username(self) -> Optional[str]:
        return self._data.get(USERNAME_KEY)

    def set_username(self, name: str) -> None:
        self._data[USERNAME_KEY] = name

    def clear_username(self) -> None:
        self._data.pop(USERNAME_KEY, None)

    def set_message(self, text: str) -> None:
        self._data[MESSAGE_KEY] = text

    def take_message(self) -> Optional[str]:
        """Return the flash message and clear it."""
        return self._data.pop(MESSAGE_KEY, None)


def get_session(request: Request) -> Session:
    return Session(request.session)


def require_user(request: Request) -> str:
    """Dependency for routes that need a signed-in user."""
    username = get_session(request).get_username()
    if not username:
        raise AuthRequired()
    return username
