from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import date

from nutritrack.models.user import GenderEnum


class UserRegister(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    date_of_birth: date
    gender: GenderEnum
    phone: Optional[str] = Field(default=None, max_length=20)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthUser(BaseModel):
    id: int
    username: str
    email: EmailStr
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


class AuthPayload(BaseModel):
    token: str
    token_type: str = "bearer"
    user: AuthUser


class TokenClaims(BaseModel):
    user_id: int
    username: str
    email: str


class CurrentUser(BaseModel):
    """Identity attached to an authenticated request."""
    user_id: int
    username: str
    email: str
