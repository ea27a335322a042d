import logging
from typing import Dict, Optional

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.config import Settings, get_settings
from ..users.service import UserService, get_user_service
from .security import decode_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service),
) -> Dict:
    """Resolve the bearer token to its user, or fail with 401.

    The token is verified before the store is touched.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized()

    try:
        claims = decode_token(credentials.credentials, settings)
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise _unauthorized()

    user_id = claims.get("_id")
    if not user_id:
        raise _unauthorized()

    user = await users.get_user_by_id(str(user_id))
    if user is None:
        raise _unauthorized()
    return user
