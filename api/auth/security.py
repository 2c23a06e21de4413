"""
Auth security helpers.
"""

from __future__ import annotations

import secrets


def _same(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def credentials_match(
    username: str | None,
    password: str | None,
    *,
    expected_username: str,
    expected_password: str,
) -> bool:
    """
    True when both Basic-auth components equal the configured pair exactly.

    An empty configured username or password never matches.
    """
    if not expected_username or not expected_password:
        return False
    if username is None or password is None:
        return False
    # Evaluate both so a wrong username costs the same as a wrong password.
    user_ok = _same(username, expected_username)
    password_ok = _same(password, expected_password)
    return user_ok and password_ok
