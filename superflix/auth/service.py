from typing import Dict, Optional

from ..users.service import UserService
from .security import check_password


async def authenticate(users: UserService, username: Optional[str], password: Optional[str]) -> Optional[Dict]:
    """Return the user when the password matches, otherwise None."""
    if not username or not password:
        return None
    user = await users.get_user(username)
    if user is None or not check_password(user.get("Password", ""), password):
        return None
    return user
