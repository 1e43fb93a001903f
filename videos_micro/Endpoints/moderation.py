from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from db.connection import get_db
from db.verify_token import verify_token, is_admin
from models.users_models import User
from schemas.video_schemas import ModerationRequest, SuccessResponse
from Endpoints.videos import get_video_or_404, delete_video_and_media

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/moderation", tags=["Moderation"])

DEFAULT_REASON = "Violation of community guidelines"


@router.delete("/videos/{video_id}", response_model=SuccessResponse)
async def terminate_video(
    video_id: int,
    payload: Optional[ModerationRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Remove any video for a policy violation (administrator only)"""
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can terminate videos"
        )

    video = get_video_or_404(db, video_id)
    reason = (payload.reason.strip() if payload and payload.reason else "") or DEFAULT_REASON

    try:
        delete_video_and_media(db, video)
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to terminate video {video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to terminate video: {str(e)}"
        )

    logger.warning(f"Admin {current_user.id} terminated video {video_id}: {reason}")
    return SuccessResponse(
        success=True,
        message=f"Video {video_id} terminated by admin for: {reason}"
    )
