from pydantic import BaseModel, Field
from typing import Optional
from schemas.return_schemas import ReturnUser


class CreateUserRequest(BaseModel):  # registration schema
    username: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=6, max_length=128)
    bio: Optional[str] = Field(None, max_length=500)


class UserLogin(BaseModel):  # login schema
    username: str
    password: str


class Token(BaseModel):  # token response schema
    access_token: str
    token_type: str = "bearer"
    user: ReturnUser


class UpdateUserRequest(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=30)
    bio: Optional[str] = Field(None, max_length=500)


class UsernameAvailability(BaseModel):
    available: bool
