from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from typing import List, Optional
import logging

from db.connection import get_db
from db.verify_token import verify_token
from models.users_models import User
from models.video_models import Video, VideoComment
from schemas.return_schemas import ReturnUser
from schemas.schemas import UpdateUserRequest
from schemas.video_schemas import VideoResponse, UserAnalytics, VideoAnalytics
from utils.media_utils import MediaUtils
from Endpoints.videos import to_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def require_self(current_user: User, user_id: int):
    if current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only update your own profile"
        )


def engagement_rate(likes: int, dislikes: int, comments: int, views: int) -> float:
    if not views:
        return 0.0
    return round((likes + dislikes + comments) / views * 100, 2)


@router.get("/{user_id}", response_model=ReturnUser)
async def get_user_profile(user_id: int, db: Session = Depends(get_db)):
    """Public profile"""
    return ReturnUser.model_validate(get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=ReturnUser)
async def update_user_profile(
    user_id: int,
    update_request: UpdateUserRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """
    Update username and bio. Passwords cannot be changed here.
    """
    require_self(current_user, user_id)

    try:
        if update_request.username and update_request.username != current_user.username:
            existing_username = db.query(User).filter(
                User.username == update_request.username,
                User.id != current_user.id
            ).first()

            if existing_username:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Username already taken"
                )

            current_user.username = update_request.username

        if update_request.bio is not None:
            current_user.bio = update_request.bio

        db.commit()
        db.refresh(current_user)
        return ReturnUser.model_validate(current_user)

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to update user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update user: {str(e)}"
        )


@router.post("/{user_id}/avatar", response_model=ReturnUser)
async def upload_avatar(
    user_id: int,
    avatar: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Replace the profile picture"""
    require_self(current_user, user_id)

    if not avatar or not avatar.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    avatar_url = await MediaUtils.save_avatar(avatar)
    previous_avatar = current_user.avatar

    try:
        current_user.avatar = avatar_url
        db.commit()
        db.refresh(current_user)
    except Exception as e:
        db.rollback()
        MediaUtils.delete_media(avatar_url)
        logger.exception(f"Failed to update avatar for user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload avatar: {str(e)}"
        )

    MediaUtils.delete_media(previous_avatar)
    return ReturnUser.model_validate(current_user)


@router.get("/{user_id}/videos", response_model=List[VideoResponse])
async def get_user_videos(user_id: int, db: Session = Depends(get_db)):
    """Videos uploaded by a user, newest first"""
    user = get_user_or_404(db, user_id)

    return to_responses(db.query(Video).filter(Video.user_id == user.id).order_by(
        desc(Video.created_at), desc(Video.id)
    ).all())


@router.get("/{user_id}/analytics", response_model=UserAnalytics)
async def get_user_analytics(user_id: int, db: Session = Depends(get_db)):
    """Totals and per-video engagement for a user's uploads"""
    user = get_user_or_404(db, user_id)

    try:
        comment_counts = dict(
            db.query(VideoComment.video_id, func.count(VideoComment.id))
            .join(Video, Video.id == VideoComment.video_id)
            .filter(Video.user_id == user.id)
            .group_by(VideoComment.video_id)
            .all()
        )

        videos = db.query(Video).filter(Video.user_id == user.id).order_by(
            desc(Video.views), desc(Video.id)
        ).all()

        video_stats = []
        for video in videos:
            comments = comment_counts.get(video.id, 0)
            video_stats.append(VideoAnalytics(
                id=video.id,
                title=video.title,
                views=video.views or 0,
                likes=video.likes or 0,
                dislikes=video.dislikes or 0,
                comments=comments,
                engagement_rate=engagement_rate(
                    video.likes or 0, video.dislikes or 0, comments, video.views or 0
                )
            ))

        return UserAnalytics(
            user_id=user.id,
            videos_count=len(video_stats),
            total_views=sum(v.views for v in video_stats),
            total_likes=sum(v.likes for v in video_stats),
            total_dislikes=sum(v.dislikes for v in video_stats),
            total_comments=sum(v.comments for v in video_stats),
            videos=video_stats
        )

    except Exception as e:
        logger.exception(f"Failed to build analytics for user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get analytics: {str(e)}"
        )
