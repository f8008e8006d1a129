# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from btcchecker.auth.store import CredentialStore
from btcchecker.errors import NotFoundError, UnauthenticatedError

logger = logging.getLogger(__name__)

SESSION_EMAIL_KEY = "user_email"


class SessionGate:
    """Capability check in front of protected routes.

    ``session`` is anything with ``get``, item assignment, ``clear`` and a
    ``modified`` flag the caller inspects to decide whether to write the
    session back (see ``btcchecker.auth.session.Session``).
    """

    def __init__(self, store: CredentialStore) -> None:
        self.store = store

    def require_authenticated(self, session) -> str:
        email = session.get(SESSION_EMAIL_KEY)
        if not email or not isinstance(email, str):
            raise UnauthenticatedError()
        # The account must still exist, not just have existed at login time.
        try:
            self.store.find(email)
        except NotFoundError:
            logger.info("session refers to unknown account %s", email)
            raise UnauthenticatedError() from None
        return email

    def establish_session(self, session, email: str) -> None:
        session[SESSION_EMAIL_KEY] = email
        session.modified = True

    def end_session(self, session) -> None:
        session.clear()
        session.modified = True
