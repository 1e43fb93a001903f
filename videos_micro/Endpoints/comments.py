from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc
from typing import List
import logging

from db.connection import get_db
from db.verify_token import verify_token, is_admin
from models.users_models import User
from models.video_models import VideoComment
from schemas.video_schemas import VideoCommentCreate, VideoCommentResponse, SuccessResponse
from Endpoints.videos import get_video_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Comments"])


@router.get("/videos/{video_id}/comments", response_model=List[VideoCommentResponse])
async def get_video_comments(
    video_id: int,
    db: Session = Depends(get_db)
):
    """Comments on a video with their authors, newest first"""
    get_video_or_404(db, video_id)

    comments = db.query(VideoComment).options(
        joinedload(VideoComment.user)
    ).filter(VideoComment.video_id == video_id).order_by(
        desc(VideoComment.created_at), desc(VideoComment.id)
    ).all()
    return [VideoCommentResponse.model_validate(comment) for comment in comments]


@router.post(
    "/videos/{video_id}/comments",
    response_model=VideoCommentResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_video_comment(
    video_id: int,
    comment_data: VideoCommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Create a comment on a video"""
    get_video_or_404(db, video_id)

    try:
        new_comment = VideoComment(
            video_id=video_id,
            user_id=current_user.id,
            content=comment_data.content
        )
        db.add(new_comment)
        db.commit()
        db.refresh(new_comment)
        return VideoCommentResponse.model_validate(new_comment)

    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to create comment on video {video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create comment: {str(e)}"
        )


@router.put("/comments/{comment_id}", response_model=VideoCommentResponse)
async def update_comment(
    comment_id: int,
    comment_data: VideoCommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Edit your own comment"""
    comment = db.query(VideoComment).filter(
        VideoComment.id == comment_id,
        VideoComment.user_id == current_user.id
    ).first()

    if not comment:
        raise HTTPException(
            status_code=404,
            detail="Comment not found or you do not have permission to edit it"
        )

    try:
        comment.content = comment_data.content
        db.commit()
        db.refresh(comment)
        return VideoCommentResponse.model_validate(comment)

    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to update comment {comment_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update comment: {str(e)}"
        )


@router.delete("/comments/{comment_id}", response_model=SuccessResponse)
async def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Delete your own comment; the administrator can delete any comment"""
    comment = db.query(VideoComment).filter(VideoComment.id == comment_id).first()

    if not comment or (comment.user_id != current_user.id and not is_admin(current_user)):
        raise HTTPException(
            status_code=404,
            detail="Comment not found or you do not have permission to delete it"
        )

    try:
        db.delete(comment)
        db.commit()
        return SuccessResponse(success=True)

    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to delete comment {comment_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete comment: {str(e)}"
        )
