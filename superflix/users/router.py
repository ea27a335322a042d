from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from typing import List, Optional

from ..auth.dependencies import get_current_user
from ..core.errors import BusinessRuleError
from ..core.validation import validated_body
from .models import PROFILE_CHECKS, REGISTRATION_CHECKS, UserCreate, UserOut, UserUpdate
from .service import UserService, get_user_service

router = APIRouter(prefix="/users", tags=["users"])

@router.post("", response_model=UserOut, status_code=201)
async def register_user(
    user: UserCreate = Depends(validated_body(UserCreate, REGISTRATION_CHECKS)),
    users: UserService = Depends(get_user_service),
):
    """Register a new user. Open to unauthenticated callers."""
    return await users.create_user(user)

@router.get("", response_model=List[UserOut], status_code=201, dependencies=[Depends(get_current_user)])
async def get_all_users(users: UserService = Depends(get_user_service)):
    return await users.list_users()

@router.get("/{Username}", response_model=Optional[UserOut], dependencies=[Depends(get_current_user)])
async def get_user(Username: str, users: UserService = Depends(get_user_service)):
    """Single user by username, or null when nobody matches"""
    return await users.get_user(Username)

@router.put("/{Username}", response_model=Optional[UserOut], dependencies=[Depends(get_current_user)])
async def update_user(
    Username: str,
    user: UserUpdate = Depends(validated_body(UserUpdate, PROFILE_CHECKS)),
    users: UserService = Depends(get_user_service),
):
    return await users.update_user(Username, user)

@router.post("/{Username}/movies/{MovieID}", response_model=Optional[UserOut], dependencies=[Depends(get_current_user)])
async def add_favorite_movie(Username: str, MovieID: str, users: UserService = Depends(get_user_service)):
    return await users.add_favorite(Username, MovieID)

@router.delete("/{Username}/movies/{MovieID}", response_model=Optional[UserOut], dependencies=[Depends(get_current_user)])
async def remove_favorite_movie(Username: str, MovieID: str, users: UserService = Depends(get_user_service)):
    return await users.remove_favorite(Username, MovieID)

@router.delete("/{Username}", response_class=PlainTextResponse, dependencies=[Depends(get_current_user)])
async def delete_user(Username: str, users: UserService = Depends(get_user_service)):
    if not await users.delete_user(Username):
        raise BusinessRuleError(f"{Username} was not found")
    return f"{Username} was deleted."
