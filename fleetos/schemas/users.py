# fleetos/schemas/users.py

# Auth, User

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from fleetos.models import UserRole

# --- AUTH ---
class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class LoginResponse(BaseModel):
    access_token: str
    expires_in: int
    token_type: str = "Bearer"
    user_id: int
    username: str
    name: str
    email: str
    role: UserRole

class RegisterUserRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=250)
    password: str = Field(..., min_length=8)

# --- USER ---
class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=250)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

class UserOut(BaseModel):
    id: int
    username: str
    email: str
    name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    class Config: from_attributes = True

class UserSimpleOut(BaseModel):
    id: int
    username: str
    name: str
    class Config: from_attributes = True
