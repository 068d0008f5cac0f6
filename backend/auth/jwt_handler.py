"""Bearer tokens for booking accounts.

The subject is the account email. Tokens are issued by whatever signs users
in; this service only needs them to carry ``sub`` and ``exp``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from backend.core import config

REQUIRED_CLAIMS = ["sub", "exp"]


def normalize_subject(email: str) -> str:
    return email.strip().lower()


def create_access_token(email: str, expires_minutes: int | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    payload = {
        "sub": normalize_subject(email),
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry. Raises ``jwt.PyJWTError`` subclasses."""
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
