from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union

from ..core.validation import Check, is_alphanumeric, is_email, min_length

USERNAME_CHECKS = [
    Check("Username", "Username is required", min_length(5)),
    Check("Username", "Username contains non-alphanumeric characters - not allowed.", is_alphanumeric),
]
PASSWORD_CHECKS = [
    Check("Password", "Password is required, min 6 characters", min_length(6)),
]
EMAIL_CHECKS = [
    Check("Email", "Email does not appear to be valid", is_email),
]

REGISTRATION_CHECKS = USERNAME_CHECKS + PASSWORD_CHECKS + EMAIL_CHECKS
PROFILE_CHECKS = USERNAME_CHECKS + EMAIL_CHECKS

class UserCreate(BaseModel):
    Username: str
    Password: str
    Email: str
    Birthday: Optional[date] = None

class UserUpdate(BaseModel):
    Username: str
    Email: str
    Birthday: Optional[date] = None

class UserOut(BaseModel):
    """A user as returned to clients. The password hash is never serialized."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    Username: str
    Email: Optional[str] = None
    Birthday: Optional[Union[date, datetime]] = None
    FavoriteMovies: List[str] = []
