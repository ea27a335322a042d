import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from ..core.config import Settings, get_settings
from ..users.service import UserService, get_user_service
from .models import Credentials, LoginResponse
from .security import issue_token
from .service import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: Optional[Credentials] = Body(default=None),
    Username: Optional[str] = None,
    Password: Optional[str] = None,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    """
    Exchange username and password for a signed token.
    Credentials may come as a JSON body or as query parameters.
    """
    if credentials is not None:
        Username = credentials.Username or Username
        Password = credentials.Password or Password

    user = await authenticate(users, Username, Password)
    if user is None:
        logger.info(f"Failed login for {Username}")
        raise HTTPException(status_code=401, detail="Unauthorized")

    return {"user": user, "token": issue_token(user, settings)}
