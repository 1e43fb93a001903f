from sqlalchemy import Column, String, Text, Boolean, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from db.database import Base

# Categories offered by the upload form
VIDEO_CATEGORIES = [
    "Action",
    "Comedy",
    "Documentary",
    "Gameplay",
    "Tutorial",
    "Competition",
    "Adventure",
    "Short Film",
]


class Video(Base):
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Stored media, served from /uploads
    thumbnail = Column(String(500), nullable=False)
    video_url = Column(String(500), nullable=False)

    category = Column(String(100), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    # Denormalized counters, kept in step with the reaction tables
    views = Column(Integer, nullable=False, default=0)
    likes = Column(Integer, nullable=False, default=0)
    dislikes = Column(Integer, nullable=False, default=0)

    featured = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="videos")
    watchlisted_by = relationship("WatchlistItem", back_populates="video", cascade="all, delete-orphan")
    like_rows = relationship("VideoLike", back_populates="video", cascade="all, delete-orphan")
    dislike_rows = relationship("VideoDislike", back_populates="video", cascade="all, delete-orphan")
    comments = relationship("VideoComment", back_populates="video", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Video(id={self.id}, title={self.title})>"


class WatchlistItem(Base):
    __tablename__ = "watchlist"
    __table_args__ = (UniqueConstraint('user_id', 'video_id', name='uq_watchlist_user_video'),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    video_id = Column(Integer, ForeignKey('videos.id'), nullable=False)
    added_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="watchlist")
    video = relationship("Video", back_populates="watchlisted_by")


class VideoLike(Base):
    __tablename__ = "video_likes"

    user_id = Column(Integer, ForeignKey('users.id'), primary_key=True)
    video_id = Column(Integer, ForeignKey('videos.id'), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="video_likes")
    video = relationship("Video", back_populates="like_rows")


class VideoDislike(Base):
    __tablename__ = "video_dislikes"

    user_id = Column(Integer, ForeignKey('users.id'), primary_key=True)
    video_id = Column(Integer, ForeignKey('videos.id'), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="video_dislikes")
    video = relationship("Video", back_populates="dislike_rows")


class VideoComment(Base):
    __tablename__ = "video_comments"

    id = Column(Integer, primary_key=True, index=True)
    video_id = Column(Integer, ForeignKey('videos.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    video = relationship("Video", back_populates="comments")
    user = relationship("User", back_populates="comments")
