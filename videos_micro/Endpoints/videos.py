"""
Video catalog API

POST /api/videos - Upload a video with its thumbnail
GET /api/videos - Browse the catalog (newest first)
GET /api/videos/featured, /popular, /search, /category/{category} - Catalog views
GET /api/videos/{id} - Fetch a video (counts a view)
PUT/DELETE /api/videos/{id} - Owner (or admin) edits and deletes
GET /api/categories - Categories accepted on upload
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query, UploadFile, File, Form
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc, or_, update
from typing import List, Optional
import logging

from db.connection import get_db
from db.verify_token import verify_token, is_admin
from models.users_models import User
from models.video_models import Video, VIDEO_CATEGORIES
from schemas.video_schemas import VideoResponse, VideoUpdateInfo, SuccessResponse
from utils.media_utils import MediaUtils

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["Videos"])
categories_router = APIRouter(prefix="/api", tags=["Videos"])


def get_video_or_404(db: Session, video_id: int) -> Video:
    video = db.query(Video).filter(Video.id == video_id).first()
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")
    return video


def validate_category(category: str) -> str:
    category = category.strip()
    if category not in VIDEO_CATEGORIES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid category. Choose one of: {', '.join(VIDEO_CATEGORIES)}"
        )
    return category


def delete_video_and_media(db: Session, video: Video) -> None:
    """Delete the row (reactions, comments and watchlist entries cascade), then its files"""
    media_urls = [video.video_url, video.thumbnail]
    db.delete(video)
    db.commit()
    for url in media_urls:
        MediaUtils.delete_media(url)


def catalog_query(db: Session):
    return db.query(Video).options(joinedload(Video.user))


def to_responses(videos) -> List[VideoResponse]:
    return [VideoResponse.model_validate(video) for video in videos]


@categories_router.get("/categories", response_model=List[str])
async def get_categories():
    """Categories accepted on upload"""
    return VIDEO_CATEGORIES


@router.get("", response_model=List[VideoResponse])
async def get_videos(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """All videos, newest first"""
    try:
        return to_responses(catalog_query(db).order_by(
            desc(Video.created_at), desc(Video.id)
        ).offset(offset).limit(limit).all())
    except Exception as e:
        logger.exception("Failed to fetch videos")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch videos: {str(e)}"
        )


@router.get("/featured", response_model=List[VideoResponse])
async def get_featured_videos(db: Session = Depends(get_db)):
    """Videos flagged for the home page banner"""
    try:
        return to_responses(catalog_query(db).filter(Video.featured == True).order_by(
            desc(Video.created_at), desc(Video.id)
        ).all())
    except Exception as e:
        logger.exception("Failed to fetch featured videos")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch featured videos: {str(e)}"
        )


@router.get("/popular", response_model=List[VideoResponse])
async def get_popular_videos(
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Most viewed videos"""
    try:
        return to_responses(catalog_query(db).order_by(
            desc(Video.views), desc(Video.id)
        ).limit(limit).all())
    except Exception as e:
        logger.exception("Failed to fetch popular videos")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch popular videos: {str(e)}"
        )


@router.get("/search", response_model=List[VideoResponse])
async def search_videos(
    q: Optional[str] = Query(None, description="Search query"),
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Case-insensitive match on title or description"""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")

    try:
        search_term = f"%{q.strip()}%"
        return to_responses(catalog_query(db).filter(
            or_(
                Video.title.ilike(search_term),
                Video.description.ilike(search_term)
            )
        ).order_by(desc(Video.views), desc(Video.id)).limit(limit).all())
    except Exception as e:
        logger.exception("Video search failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to search videos: {str(e)}"
        )


@router.get("/category/{category}", response_model=List[VideoResponse])
async def get_videos_by_category(
    category: str,
    db: Session = Depends(get_db)
):
    """Videos in one category"""
    try:
        return to_responses(catalog_query(db).filter(Video.category == category).order_by(
            desc(Video.created_at), desc(Video.id)
        ).all())
    except Exception as e:
        logger.exception("Failed to fetch videos by category")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch videos by category: {str(e)}"
        )


@router.get("/{video_id}", response_model=VideoResponse)
async def get_video(
    video_id: int,
    db: Session = Depends(get_db)
):
    """Get a single video and count the view"""
    get_video_or_404(db, video_id)

    try:
        db.execute(
            update(Video)
            .where(Video.id == video_id)
            .values(views=Video.views + 1)
        )
        db.commit()
        return VideoResponse.model_validate(
            catalog_query(db).filter(Video.id == video_id).first()
        )
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to fetch video {video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch video: {str(e)}"
        )


@router.post("", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def upload_video(
    video: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    category: str = Form(...),
    featured: bool = Form(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """
    Upload a video with its thumbnail

    Both files are required. They are stored under UPLOAD_DIR and the
    record points at their /uploads URLs.
    """
    if not video or not video.filename or not thumbnail or not thumbnail.filename:
        raise HTTPException(status_code=400, detail="Both video and thumbnail are required")

    title = title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Video title is required")
    if len(title) > 255:
        raise HTTPException(status_code=400, detail="Video title too long")

    category = validate_category(category)

    stored_urls = []
    try:
        video_url = await MediaUtils.save_video(video)
        stored_urls.append(video_url)
        thumbnail_url = await MediaUtils.save_thumbnail(thumbnail)
        stored_urls.append(thumbnail_url)

        new_video = Video(
            title=title,
            description=description.strip() if description else None,
            thumbnail=thumbnail_url,
            video_url=video_url,
            category=category,
            user_id=current_user.id,
            featured=featured,
            views=0,
            likes=0,
            dislikes=0
        )
        db.add(new_video)
        db.commit()
        db.refresh(new_video)

        logger.info(f"User {current_user.id} uploaded video {new_video.id}")
        return VideoResponse.model_validate(new_video)

    except HTTPException:
        for url in stored_urls:
            MediaUtils.delete_media(url)
        raise
    except Exception as e:
        db.rollback()
        for url in stored_urls:
            MediaUtils.delete_media(url)
        logger.exception("Video upload failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload video: {str(e)}"
        )


@router.put("/{video_id}", response_model=VideoResponse)
async def update_video_info(
    video_id: int,
    update_data: VideoUpdateInfo,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Update video information (owner or admin)"""
    video = get_video_or_404(db, video_id)

    if video.user_id != current_user.id and not is_admin(current_user):
        raise HTTPException(status_code=403, detail="You can only edit your own videos")

    try:
        if update_data.title is not None:
            title = update_data.title.strip()
            if not title:
                raise HTTPException(status_code=400, detail="Video title is required")
            video.title = title
        if update_data.description is not None:
            video.description = update_data.description.strip() or None
        if update_data.category is not None:
            video.category = validate_category(update_data.category)
        if update_data.featured is not None:
            video.featured = update_data.featured

        db.commit()
        db.refresh(video)
        return VideoResponse.model_validate(video)

    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to update video {video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update video: {str(e)}"
        )


@router.delete("/{video_id}", response_model=SuccessResponse)
async def delete_video(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(verify_token)
):
    """Delete a video and its files (owner, or admin for any video)"""
    video = get_video_or_404(db, video_id)

    if video.user_id != current_user.id and not is_admin(current_user):
        raise HTTPException(status_code=403, detail="You can only delete your own videos")

    try:
        delete_video_and_media(db, video)
        logger.info(f"User {current_user.id} deleted video {video_id}")
        return SuccessResponse(success=True)

    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to delete video {video_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete video: {str(e)}"
        )
