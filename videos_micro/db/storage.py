"""
Data access for reactions and watchlists.

Like/dislike rows and the denormalized ``videos.likes``/``videos.dislikes``
counters are written in the same transaction, so the counter always equals
the number of reaction rows for the video. Inserts are deduplicated on the
existing (user, video) key; a concurrent duplicate that slips past the check
hits the primary key and the existing row is returned instead.
"""

import logging
from typing import Optional, Type, Union

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.video_models import Video, VideoLike, VideoDislike, WatchlistItem

logger = logging.getLogger(__name__)

Reaction = Union[VideoLike, VideoDislike]


def _get_reaction(db: Session, model: Type[Reaction], user_id: int, video_id: int) -> Optional[Reaction]:
    return db.query(model).filter(
        model.user_id == user_id,
        model.video_id == video_id
    ).first()


def _add_reaction(db: Session, model: Type[Reaction], counter, user_id: int, video_id: int) -> Reaction:
    existing = _get_reaction(db, model, user_id, video_id)
    if existing:
        return existing

    reaction = model(user_id=user_id, video_id=video_id)
    try:
        db.add(reaction)
        db.flush()
        db.execute(
            update(Video)
            .where(Video.id == video_id)
            .values({counter: counter + 1})
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Duplicate {model.__tablename__} row for user {user_id}, video {video_id}")
        return _get_reaction(db, model, user_id, video_id)
    except Exception:
        db.rollback()
        raise

    db.refresh(reaction)
    return reaction


def _remove_reaction(db: Session, model: Type[Reaction], counter, user_id: int, video_id: int) -> bool:
    try:
        deleted = db.query(model).filter(
            model.user_id == user_id,
            model.video_id == video_id
        ).delete(synchronize_session=False)

        if deleted:
            db.execute(
                update(Video)
                .where(Video.id == video_id)
                .values({counter: counter - deleted})
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    return deleted > 0


# Likes
def like_video(db: Session, user_id: int, video_id: int) -> VideoLike:
    return _add_reaction(db, VideoLike, Video.likes, user_id, video_id)


def unlike_video(db: Session, user_id: int, video_id: int) -> bool:
    return _remove_reaction(db, VideoLike, Video.likes, user_id, video_id)


def is_liked(db: Session, user_id: int, video_id: int) -> bool:
    return _get_reaction(db, VideoLike, user_id, video_id) is not None


# Dislikes
def dislike_video(db: Session, user_id: int, video_id: int) -> VideoDislike:
    return _add_reaction(db, VideoDislike, Video.dislikes, user_id, video_id)


def undislike_video(db: Session, user_id: int, video_id: int) -> bool:
    return _remove_reaction(db, VideoDislike, Video.dislikes, user_id, video_id)


def is_disliked(db: Session, user_id: int, video_id: int) -> bool:
    return _get_reaction(db, VideoDislike, user_id, video_id) is not None


# Watchlist
def _get_watchlist_item(db: Session, user_id: int, video_id: int) -> Optional[WatchlistItem]:
    return db.query(WatchlistItem).filter(
        WatchlistItem.user_id == user_id,
        WatchlistItem.video_id == video_id
    ).first()


def add_to_watchlist(db: Session, user_id: int, video_id: int) -> WatchlistItem:
    existing = _get_watchlist_item(db, user_id, video_id)
    if existing:
        return existing

    item = WatchlistItem(user_id=user_id, video_id=video_id)
    try:
        db.add(item)
        db.commit()
    except IntegrityError:
        db.rollback()
        return _get_watchlist_item(db, user_id, video_id)

    db.refresh(item)
    return item


def remove_from_watchlist(db: Session, user_id: int, video_id: int) -> bool:
    try:
        deleted = db.query(WatchlistItem).filter(
            WatchlistItem.user_id == user_id,
            WatchlistItem.video_id == video_id
        ).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return deleted > 0


def is_in_watchlist(db: Session, user_id: int, video_id: int) -> bool:
    return _get_watchlist_item(db, user_id, video_id) is not None
