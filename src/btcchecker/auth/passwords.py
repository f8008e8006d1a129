# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import bcrypt

# bcrypt's lowest work factor, which is what the user files in the wild were
# written with. Raise it through the config (``hash_rounds``) for production.
MIN_ROUNDS = 4
MAX_ROUNDS = 31


def check_rounds(rounds: int) -> int:
    if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
        raise ValueError(f"bcrypt rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got {rounds}")
    return rounds


def hash_password(plain: str, *, rounds: int = MIN_ROUNDS) -> str:
    if not plain:
        raise ValueError("empty password")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hash_value.encode("utf-8"))
    except ValueError:
        # not a bcrypt hash
        return False
