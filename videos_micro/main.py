from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv
from sqlalchemy import text
import logging
import os

from Endpoints import auth, users, videos, moderation, watchlist, reactions, comments
from db.database import engine, Base
from utils.media_utils import MediaUtils
import models  # noqa: F401  registers every table on Base.metadata

load_dotenv()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="GorillaFlix Video API",
    description="Backend API for GorillaFlix - share, browse and discuss short videos",
    version="1.0.0"
)

# Configure CORS
cors_origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Test database connection on startup
@app.on_event("startup")
async def startup_event():
    logger.info("Testing database connection...")
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
        logger.info("Database connection successful, tables verified/created")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        logger.warning("App will start but database functionality will be limited")


# Create uploads directory and serve uploaded media from it
uploads_dir = MediaUtils.ensure_upload_dir()
app.mount("/uploads", StaticFiles(directory=str(uploads_dir)), name="uploads")

# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(videos.categories_router)
app.include_router(videos.router)
app.include_router(comments.router)
app.include_router(watchlist.router)
app.include_router(reactions.likes_router)
app.include_router(reactions.dislikes_router)
app.include_router(moderation.router)


@app.get("/")
def root():
    return {
        "message": "Welcome to the GorillaFlix Video API",
        "version": "1.0.0",
        "features": [
            "User Authentication",
            "Video Uploads with Thumbnails",
            "Browse, Categories & Search",
            "Watchlist",
            "Likes & Dislikes",
            "Comments",
            "Creator Analytics",
            "Admin Moderation"
        ]
    }


@app.get("/health")
def health_check():
    """Health check endpoint with database status"""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "database": "connected",
            "message": "GorillaFlix API is running successfully"
        }
    except Exception as e:
        return {
            "status": "degraded",
            "database": "disconnected",
            "error": str(e),
            "message": "API is running but database is unavailable"
        }
