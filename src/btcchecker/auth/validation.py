# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email

from btcchecker.errors import ValidationError

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 15  # inclusive


def validate_credentials(email: str, password: str) -> None:
    """Reject credentials that could never belong to an account.

    Raises ValidationError. Nothing is normalised: the store keys on the
    email exactly as given.
    """
    if not email or not password:
        raise ValidationError("empty email or password")

    try:
        validate_email(email, check_deliverability=False, test_environment=True)
    except EmailNotValidError:
        raise ValidationError("must be a valid email address") from None

    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise ValidationError(
            f"password length must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH}"
        )
