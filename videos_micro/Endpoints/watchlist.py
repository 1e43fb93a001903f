from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List
import logging

from db import storage
from db.connection import get_db
from db.verify_token import verify_token
from models.users_models import User
from models.video_models import Video, WatchlistItem
from schemas.video_schemas import (
    VideoReference, VideoResponse, WatchlistItemResponse, WatchlistStatus, SuccessResponse
)
from Endpoints.videos import get_video_or_404, to_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/watchlist", tags=["Watchlist"])


@router.get("", response_model=List[VideoResponse])
async def get_watchlist(
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Watchlisted videos, most recently added first"""
    return to_responses(db.query(Video).join(
        WatchlistItem, WatchlistItem.video_id == Video.id
    ).filter(
        WatchlistItem.user_id == current_user.id
    ).order_by(desc(WatchlistItem.added_at), desc(WatchlistItem.id)).all())


@router.post("", response_model=WatchlistItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_watchlist(
    item: VideoReference,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    get_video_or_404(db, item.video_id)

    try:
        entry = storage.add_to_watchlist(db, current_user.id, item.video_id)
        return WatchlistItemResponse.model_validate(entry)
    except Exception as e:
        logger.exception("Failed to add to watchlist")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to add to watchlist: {str(e)}"
        )


@router.delete("/{video_id}", response_model=SuccessResponse)
async def remove_from_watchlist(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    try:
        removed = storage.remove_from_watchlist(db, current_user.id, video_id)
    except Exception as e:
        logger.exception("Failed to remove from watchlist")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to remove from watchlist: {str(e)}"
        )

    if not removed:
        raise HTTPException(status_code=404, detail="Watchlist item not found")

    return SuccessResponse(success=True)


@router.get("/check/{video_id}", response_model=WatchlistStatus)
async def check_watchlist(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    return WatchlistStatus(is_in_watchlist=storage.is_in_watchlist(db, current_user.id, video_id))
