from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from schemas.return_schemas import PublicUser


# Video Schemas
class VideoResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    thumbnail: str
    video_url: str
    category: str
    user_id: int
    user: Optional[PublicUser] = None
    views: int = 0
    likes: int = 0
    dislikes: int = 0
    featured: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VideoUpdateInfo(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    featured: Optional[bool] = None


class VideoReference(BaseModel):  # body of watchlist/like/dislike requests
    video_id: int = Field(..., ge=1)


# Watchlist Schemas
class WatchlistItemResponse(BaseModel):
    id: int
    user_id: int
    video_id: int
    added_at: datetime

    class Config:
        from_attributes = True


class WatchlistStatus(BaseModel):
    is_in_watchlist: bool


# Reaction Schemas
class ReactionResponse(BaseModel):
    user_id: int
    video_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class LikeStatus(BaseModel):
    is_liked: bool


class DislikeStatus(BaseModel):
    is_disliked: bool


# Comment Schemas
COMMENT_MAX_LENGTH = 2000


class VideoCommentCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_length(cls, value: str) -> str:
        """Length limits apply to the stripped text"""
        value = value.strip()
        if not value:
            raise ValueError("Comment cannot be empty")
        if len(value) > COMMENT_MAX_LENGTH:
            raise ValueError(f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters")
        return value


class VideoCommentResponse(BaseModel):
    id: int
    video_id: int
    user_id: int
    user: PublicUser
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Moderation Schemas
class ModerationRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


# Analytics Schemas
class VideoAnalytics(BaseModel):
    id: int
    title: str
    views: int = 0
    likes: int = 0
    dislikes: int = 0
    comments: int = 0
    engagement_rate: float = 0.0


class UserAnalytics(BaseModel):
    user_id: int
    videos_count: int = 0
    total_views: int = 0
    total_likes: int = 0
    total_dislikes: int = 0
    total_comments: int = 0
    videos: List[VideoAnalytics] = []


# Response Schemas
class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
