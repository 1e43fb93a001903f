from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from db import storage
from db.connection import get_db
from db.verify_token import verify_token
from models.users_models import User
from schemas.video_schemas import (
    VideoReference, ReactionResponse, LikeStatus, DislikeStatus, SuccessResponse
)
from Endpoints.videos import get_video_or_404

logger = logging.getLogger(__name__)

likes_router = APIRouter(prefix="/api/likes", tags=["Likes"])
dislikes_router = APIRouter(prefix="/api/dislikes", tags=["Dislikes"])


# Likes
@likes_router.post("", response_model=ReactionResponse, status_code=status.HTTP_201_CREATED)
async def like_video(
    reaction: VideoReference,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Like a video; liking twice keeps a single like"""
    get_video_or_404(db, reaction.video_id)

    try:
        like = storage.like_video(db, current_user.id, reaction.video_id)
        return ReactionResponse.model_validate(like)
    except Exception as e:
        logger.exception(f"Failed to like video {reaction.video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to like video: {str(e)}"
        )


@likes_router.delete("/{video_id}", response_model=SuccessResponse)
async def unlike_video(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    try:
        removed = storage.unlike_video(db, current_user.id, video_id)
    except Exception as e:
        logger.exception(f"Failed to unlike video {video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to unlike video: {str(e)}"
        )

    if not removed:
        raise HTTPException(status_code=404, detail="Like not found")

    return SuccessResponse(success=True)


@likes_router.get("/check/{video_id}", response_model=LikeStatus)
async def check_like(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    return LikeStatus(is_liked=storage.is_liked(db, current_user.id, video_id))


# Dislikes
@dislikes_router.post("", response_model=ReactionResponse, status_code=status.HTTP_201_CREATED)
async def dislike_video(
    reaction: VideoReference,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Dislike a video; disliking twice keeps a single dislike"""
    get_video_or_404(db, reaction.video_id)

    try:
        dislike = storage.dislike_video(db, current_user.id, reaction.video_id)
        return ReactionResponse.model_validate(dislike)
    except Exception as e:
        logger.exception(f"Failed to dislike video {reaction.video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to dislike video: {str(e)}"
        )


@dislikes_router.delete("/{video_id}", response_model=SuccessResponse)
async def undislike_video(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    try:
        removed = storage.undislike_video(db, current_user.id, video_id)
    except Exception as e:
        logger.exception(f"Failed to undislike video {video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to undislike video: {str(e)}"
        )

    if not removed:
        raise HTTPException(status_code=404, detail="Dislike not found")

    return SuccessResponse(success=True)


@dislikes_router.get("/check/{video_id}", response_model=DislikeStatus)
async def check_dislike(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    return DislikeStatus(is_disliked=storage.is_disliked(db, current_user.id, video_id))
