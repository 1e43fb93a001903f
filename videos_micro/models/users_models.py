from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from datetime import datetime
from sqlalchemy.orm import relationship
from db.database import Base


class User(Base):
    __tablename__ = "users"

    # Primary identifiers
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, nullable=False, index=True)

    # Authentication
    password_hash = Column(String(255), nullable=False)

    # Basic profile
    avatar = Column(String(500), nullable=True)  # /uploads/<file> path
    bio = Column(Text, nullable=True)

    # Account status
    is_active = Column(Boolean, default=True)
    is_admin = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    videos = relationship("Video", back_populates="user", cascade="all, delete-orphan")
    comments = relationship("VideoComment", back_populates="user", cascade="all, delete-orphan")
    watchlist = relationship("WatchlistItem", back_populates="user", cascade="all, delete-orphan")
    video_likes = relationship("VideoLike", back_populates="user", cascade="all, delete-orphan")
    video_dislikes = relationship("VideoDislike", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"
