"""JWT utilities.

The API only verifies bearer tokens; accounts log in through the auth
service, which signs with the same secret. ``create_access_token`` mints a
compatible token for the test suite and for local scripts.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from rehabcompanion.core.config import settings


def create_access_token(user_id: int, claims: dict[str, Any] | None = None) -> str:
    """Signed token whose ``sub`` is ``user_id``."""
    issued = datetime.now(timezone.utc)
    payload = {**(claims or {}), "sub": str(user_id), "iat": issued}
    payload["exp"] = issued + timedelta(minutes=settings.jwt_expire_minutes)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate a JWT. Returns payload or None if invalid."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
