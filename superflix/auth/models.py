from pydantic import BaseModel
from typing import Optional

from ..users.models import UserOut

class Credentials(BaseModel):
    Username: Optional[str] = None
    Password: Optional[str] = None

class LoginResponse(BaseModel):
    user: UserOut
    token: str
