"""Password hashing and token signing."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from ..core.config import Settings


def hash_password(password: str) -> str:
    return generate_password_hash(password, method='pbkdf2:sha256')


def check_password(hashed: str, password: str) -> bool:
    if not hashed:
        return False
    return check_password_hash(hashed, password)


def issue_token(user: Dict[str, Any], settings: Settings) -> str:
    """Sign a token identifying ``user`` by document id, with the username as subject."""
    now = datetime.now(timezone.utc)
    payload = {
        "_id": user["_id"],
        "sub": user["Username"],
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    """Verify signature and expiry. Raises ``jwt.InvalidTokenError``."""
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
