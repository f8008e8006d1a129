# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error kinds raised by the credential store, the session gate and the app.

Every error carries a stable ``code`` and the ``http_status`` the API layer
answers with, so a single exception handler can render all of them.
"""

from __future__ import annotations

# Shared by AuthError and ConflictError: callers must not learn whether an
# account exists from the message.
GENERIC_CREDENTIALS_MESSAGE = "incorrect email or password"


class CheckerError(Exception):
    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CheckerError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(CheckerError):
    """Email or password has the wrong shape."""

    code = "VALIDATION_ERROR"
    http_status = 422


class ConflictError(CheckerError):
    """Email is already registered."""

    code = "CONFLICT"
    http_status = 422

    def __init__(self, message: str = GENERIC_CREDENTIALS_MESSAGE):
        super().__init__(message)


class NotFoundError(CheckerError):
    """No record for the email. Internal: the API surfaces AuthError instead."""

    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, message: str = GENERIC_CREDENTIALS_MESSAGE):
        super().__init__(message)


class AuthError(CheckerError):
    """Bad credentials. Unknown email and wrong password look the same."""

    code = "AUTH_FAILED"
    http_status = 401

    def __init__(self, message: str = GENERIC_CREDENTIALS_MESSAGE):
        super().__init__(message)


class UnauthenticatedError(CheckerError):
    code = "UNAUTHENTICATED"
    http_status = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class StorageError(CheckerError):
    """Backing file could not be read, parsed, created or appended to."""

    code = "STORAGE_ERROR"
    http_status = 500


class UpstreamError(CheckerError):
    """The BTC price provider failed or answered something unusable."""

    code = "UPSTREAM_ERROR"
    http_status = 502


class ConfigError(CheckerError):
    code = "CONFIG_ERROR"
