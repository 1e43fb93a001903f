from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ReturnUser(BaseModel):
    # Primary identifiers
    id: int
    username: str

    # Basic profile
    avatar: Optional[str] = None
    bio: Optional[str] = None

    # Account status
    is_admin: Optional[bool] = False
    is_active: Optional[bool] = True

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicUser(BaseModel):
    """Author/uploader summary embedded in videos and comments"""
    id: int
    username: str
    avatar: Optional[str] = None

    class Config:
        from_attributes = True
