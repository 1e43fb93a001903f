# Importing the models registers every table on Base.metadata
from .users_models import User
from .video_models import (
    Video, WatchlistItem, VideoLike, VideoDislike, VideoComment, VIDEO_CATEGORIES
)

__all__ = [
    'User', 'Video', 'WatchlistItem', 'VideoLike', 'VideoDislike',
    'VideoComment', 'VIDEO_CATEGORIES'
]
