"""Signed token issuance and verification (JWT, HS256).

Session tokens and password-reset tokens share the signing key but carry
different `type` claims, so one can never be accepted in place of the other.
"""

import logging
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(hours=1)
RESET_TOKEN_TTL = timedelta(hours=1)

ACCESS = "access"
RESET = "reset"


def create_access_token(user_id: str) -> str:
    """Create a session token whose subject is the user id."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "type": ACCESS,
        "iat": now,
        "exp": now + ACCESS_TOKEN_TTL,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_reset_token(user_id: str, expires_at: datetime) -> str:
    """Create a single-purpose reset token expiring exactly at expires_at.

    The caller stores the same expires_at next to the token.
    """
    payload = {
        "sub": user_id,
        "type": RESET,
        "jti": uuid.uuid4().hex,
        "iat": datetime.now(timezone.utc),
        "exp": expires_at,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_token(token: str, expected_type: str = ACCESS) -> Optional[str]:
    """Verify signature, expiry and type. Return the user id or None."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None

    if payload.get("type") != expected_type:
        return None
    return payload.get("sub")
