# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import io
import logging
import os
import threading
from pathlib import Path
from typing import Dict, Union

from btcchecker.auth.passwords import MIN_ROUNDS, check_rounds, hash_password, verify_password
from btcchecker.auth.validation import validate_credentials
from btcchecker.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DELIMITER = ","


def _parse_line(line: str, lineno: int, path: Path) -> tuple:
    fields = line.split(DELIMITER)
    if len(fields) != 2 or not fields[0] or not fields[1]:
        raise StorageError(f"{path}:{lineno}: expected 'email{DELIMITER}password_hash'")
    return fields[0], fields[1]


def _load_users_file(path: Path) -> Dict[str, str]:
    if not path.exists():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        except OSError as e:
            raise StorageError(f"cannot create {path}: {e}") from e
        return {}

    out: Dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8", newline="") as fh:
            for lineno, raw in enumerate(fh, start=1):
                line = raw.rstrip("\r\n")
                if not line.strip():
                    continue
                email, password_hash = _parse_line(line, lineno, path)
                out[email] = password_hash
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"cannot read {path}: {e}") from e
    return out


class CredentialStore:
    """Email -> password hash mapping backed by an append-only file.

    The whole file is read once on construction. ``add_user`` appends a line
    and only then updates memory; a failed write is cut back off the file, so
    both memory and disk stay as they were. One lock serialises registrations
    end to end and guards every read of the mapping.
    """

    def __init__(self, path: Union[str, Path], *, rounds: int = MIN_ROUNDS) -> None:
        self._path = Path(path)
        self._rounds = check_rounds(rounds)
        self._lock = threading.Lock()
        self._users = _load_users_file(self._path)
        logger.debug("loaded %d user(s) from %s", len(self._users), self._path)

    @property
    def path(self) -> Path:
        return self._path

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def __contains__(self, email: object) -> bool:
        with self._lock:
            return email in self._users

    def find(self, email: str) -> str:
        with self._lock:
            return self._find_locked(email)

    def _find_locked(self, email: str) -> str:
        try:
            return self._users[email]
        except KeyError:
            raise NotFoundError() from None

    def validate(self, email: str, password: str) -> None:
        validate_credentials(email, password)

    def add_user(self, email: str, password: str) -> None:
        self.validate(email, password)

        with self._lock:
            try:
                self._find_locked(email)
            except NotFoundError:
                pass
            else:
                raise ConflictError()

            password_hash = hash_password(password, rounds=self._rounds)
            self._append(email, password_hash)
            self._users[email] = password_hash

        logger.info("registered user %s", email)

    def authenticate(self, email: str, password: str) -> None:
        try:
            self.validate(email, password)
            password_hash = self.find(email)
        except (ValidationError, NotFoundError):
            raise AuthError() from None

        if not verify_password(password_hash, password):
            raise AuthError()

    def _open_for_append(self) -> io.RawIOBase:
        # Unbuffered: every byte written has reached the file, so a failure
        # can be undone with truncate() without a pending flush.
        return self._path.open("ab", buffering=0)

    def _append(self, email: str, password_hash: str) -> None:
        data = memoryview(f"{email}{DELIMITER}{password_hash}\n".encode("utf-8"))
        try:
            with self._open_for_append() as fh:
                offset = fh.seek(0, os.SEEK_END)
                try:
                    while data:
                        written = fh.write(data)
                        data = data[written:]
                except OSError:
                    fh.truncate(offset)
                    raise
        except OSError as e:
            raise StorageError(f"cannot append to {self._path}: {e}") from e
