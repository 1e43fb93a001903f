"""
Media storage utilities

Uploaded files are validated, normalized and written to UPLOAD_DIR:
- File types are sniffed from the content with libmagic
- Videos are stored as uploaded (no transcoding)
- Thumbnails and avatars are re-encoded to progressive JPEG and bounded in size
- Every stored file gets a random uuid4 name and is exposed as /uploads/<name>
"""

import io
import logging
import mimetypes
import os
import uuid
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv
from fastapi import UploadFile, HTTPException
import magic
from PIL import Image, UnidentifiedImageError

load_dotenv()

logger = logging.getLogger(__name__)

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "uploads"))
UPLOAD_URL_PREFIX = "/uploads/"


class MediaUtils:

    # Accepted top-level MIME types, checked against the sniffed content
    VIDEO_PREFIX = "video/"
    IMAGE_PREFIX = "image/"

    # Size limits (in bytes)
    MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 50 * 1024 * 1024))  # 50MB

    # Bounding boxes for re-encoded images (width, height)
    THUMBNAIL_SIZE = (1280, 720)
    AVATAR_SIZE = (512, 512)

    IMAGE_QUALITY = 85

    @staticmethod
    def ensure_upload_dir() -> Path:
        UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
        return UPLOAD_DIR

    @staticmethod
    def detect_mime_type(content: bytes, file: UploadFile) -> str:
        """MIME type sniffed from the file content, falling back to the filename"""
        try:
            mime_type = magic.from_buffer(content, mime=True)
        except magic.MagicException as e:
            logger.warning(f"Content sniffing failed for {file.filename}: {e}")
            mime_type, _ = mimetypes.guess_type(file.filename or "")
            if not mime_type:
                mime_type = file.content_type or 'application/octet-stream'
        return mime_type.lower()

    @staticmethod
    async def read_upload(
        file: UploadFile,
        media_prefix: str,
        max_size: int = None
    ) -> Tuple[bytes, str]:
        """
        Read an uploaded file and validate its size and type

        Args:
            file: FastAPI UploadFile object
            media_prefix: Required top-level MIME type, 'video/' or 'image/'
            max_size: Maximum file size in bytes

        Returns:
            Tuple of (binary_data, mime_type)

        Raises:
            HTTPException: If file validation fails
        """
        if not file or not file.filename:
            raise HTTPException(status_code=400, detail="No file provided")

        max_size = max_size or MediaUtils.MAX_UPLOAD_SIZE

        # Read one byte past the limit so oversize files are caught without buffering them whole
        content = await file.read(max_size + 1)

        if not content:
            raise HTTPException(status_code=400, detail="File is empty")

        if len(content) > max_size:
            size_mb = max_size // (1024 * 1024)
            raise HTTPException(
                status_code=413,
                detail=f"File size exceeds {size_mb}MB limit"
            )

        mime_type = MediaUtils.detect_mime_type(content, file)
        if not mime_type.startswith(media_prefix):
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type: {mime_type}"
            )

        return content, mime_type

    @staticmethod
    def optimize_image(image_data: bytes, target_size: tuple) -> bytes:
        """
        Re-encode an image as progressive JPEG that fits inside target_size.
        Transparent images are flattened onto white.
        """
        try:
            img = Image.open(io.BytesIO(image_data))
            img.load()
        except (UnidentifiedImageError, OSError, SyntaxError):
            raise HTTPException(status_code=400, detail="Invalid image file")

        if img.mode in ('RGBA', 'LA', 'P'):
            if img.mode == 'P':
                img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            img = background
        elif img.mode != 'RGB':
            img = img.convert('RGB')

        img.thumbnail(target_size, Image.Resampling.LANCZOS)

        output_buffer = io.BytesIO()
        img.save(
            output_buffer,
            format='JPEG',
            quality=MediaUtils.IMAGE_QUALITY,
            optimize=True,
            progressive=True
        )
        return output_buffer.getvalue()

    @staticmethod
    def store_bytes(data: bytes, extension: str) -> str:
        """Write data under a fresh uuid4 name and return its public URL path"""
        upload_dir = MediaUtils.ensure_upload_dir()
        filename = f"{uuid.uuid4()}{extension.lower()}"
        (upload_dir / filename).write_bytes(data)
        logger.info(f"Stored upload {filename} ({len(data)} bytes)")
        return f"{UPLOAD_URL_PREFIX}{filename}"

    @staticmethod
    async def save_video(file: UploadFile) -> str:
        content, mime_type = await MediaUtils.read_upload(file, MediaUtils.VIDEO_PREFIX)
        extension = Path(file.filename).suffix or mimetypes.guess_extension(mime_type) or ".mp4"
        return MediaUtils.store_bytes(content, extension)

    @staticmethod
    async def save_thumbnail(file: UploadFile) -> str:
        content, _ = await MediaUtils.read_upload(file, MediaUtils.IMAGE_PREFIX)
        optimized = MediaUtils.optimize_image(content, MediaUtils.THUMBNAIL_SIZE)
        return MediaUtils.store_bytes(optimized, ".jpg")

    @staticmethod
    async def save_avatar(file: UploadFile) -> str:
        content, _ = await MediaUtils.read_upload(file, MediaUtils.IMAGE_PREFIX)
        optimized = MediaUtils.optimize_image(content, MediaUtils.AVATAR_SIZE)
        return MediaUtils.store_bytes(optimized, ".jpg")

    @staticmethod
    def path_for_url(url: Optional[str]) -> Optional[Path]:
        """Map an /uploads/<name> URL back to its file; None for anything else"""
        if not url or not url.startswith(UPLOAD_URL_PREFIX):
            return None
        name = Path(url[len(UPLOAD_URL_PREFIX):]).name
        if not name:
            return None
        return UPLOAD_DIR / name

    @staticmethod
    def delete_media(url: Optional[str]) -> bool:
        path = MediaUtils.path_for_url(url)
        if path is None or not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete media file {path}: {e}")
            return False
        logger.info(f"Deleted media file {path.name}")
        return True
