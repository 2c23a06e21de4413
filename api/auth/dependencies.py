"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

import base64
import logging

from fastapi import Depends, Header, Request

from core.config import Settings, get_settings
from core.errors import AuthError

from . import security

logger = logging.getLogger(__name__)


def _extract_basic_credentials(authorization: str | None) -> tuple[str, str] | None:
    """
    Decode `Authorization: Basic <base64(user:password)>` as UTF-8.

    Returns None when the header is missing or malformed.
    """
    raw = (authorization or "").strip()
    if not raw:
        return None

    parts = raw.split(" ", 1)
    if len(parts) != 2 or parts[0].strip().lower() != "basic":
        return None

    try:
        decoded = base64.b64decode(parts[1].strip(), validate=True).decode("utf-8")
    except ValueError:
        return None

    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return username, password


async def require_basic_auth(
    request: Request,
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Gate a route behind the configured Basic-auth pair.

    Returns the authenticated username; raises AuthError (401) otherwise.
    """
    credentials = _extract_basic_credentials(authorization)
    username, password = credentials if credentials is not None else (None, None)

    if not security.credentials_match(
        username,
        password,
        expected_username=settings.auth_user,
        expected_password=settings.auth_password,
    ):
        logger.warning(
            "auth_rejected method=%s path=%s has_credentials=%s",
            request.method,
            request.url.path,
            credentials is not None,
        )
        raise AuthError()
    return username
