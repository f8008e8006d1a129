# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication core.

This package provides:
- Password hashing/verification (bcrypt)
- Credential store backed by an append-only email,hash file
- Signed session cookies (itsdangerous) and the session gate
"""

from btcchecker.auth.gate import SessionGate
from btcchecker.auth.store import CredentialStore

__all__ = ["CredentialStore", "SessionGate"]
