# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

DEFAULT_COOKIE_NAME = "btcchecker"
DEFAULT_MAX_AGE_SECONDS = 30 * 24 * 3600
DEFAULT_SALT = "btcchecker.session.v1"


class Session:
    """Key-value bag restored from (and written back to) the session cookie."""

    def __init__(self, values: Optional[Dict[str, Any]] = None) -> None:
        self.values: Dict[str, Any] = dict(values or {})
        self.modified = False

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.values[key] = value
        self.modified = True

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def clear(self) -> None:
        self.values.clear()
        self.modified = True


class CookieSessions:
    """Signed-cookie session storage.

    The cookie holds the whole bag, signed and timestamped; nothing is kept
    server side.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
        secure: bool = False,
        salt: str = DEFAULT_SALT,
    ) -> None:
        if not secret_key:
            raise ValueError("session secret key is required")
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)

    def dumps(self, session: Session) -> str:
        return self._serializer.dumps(session.values)

    def loads(self, token: str) -> Session:
        if not token:
            return Session()
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            return Session()
        if not isinstance(data, dict):
            return Session()
        return Session(data)

    def get(self, request: Request) -> Session:
        return self.loads(request.cookies.get(self.cookie_name, ""))

    def save(self, response: Response, session: Session) -> None:
        if not session.values:
            response.delete_cookie(self.cookie_name)
            return
        response.set_cookie(
            self.cookie_name,
            self.dumps(session),
            max_age=self.max_age,
            **self.cookie_settings(),
        )

    def cookie_settings(self) -> dict:
        return {"httponly": True, "samesite": "lax", "secure": self.secure}
