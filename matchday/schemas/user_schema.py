# matchday/schemas/user_schema.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, constr, ConfigDict

class UserCreate(BaseModel):
    username: constr(min_length=3, max_length=50)
    email: EmailStr
    password: constr(min_length=6)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: EmailStr
    is_admin: bool = False
    email_verified_at: Optional[datetime] = None


class EmailVerificationRequest(BaseModel):
    token: str
