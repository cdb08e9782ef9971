"""
Image upload storage. Files land on local disk under UPLOAD_DIR and are
served back from MEDIA_URL.
"""

import uuid
from pathlib import Path

import anyio
from fastapi import HTTPException, UploadFile, status

from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger

logger = get_logger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def upload_root() -> Path:
    return Path(get_settings().UPLOAD_DIR)


async def store_image(upload: UploadFile) -> str:
    """Persist an uploaded image and return its public URL."""
    settings = get_settings()
    extension = ALLOWED_CONTENT_TYPES.get(upload.content_type or "")
    if extension is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only JPEG, PNG, GIF or WebP images can be uploaded",
        )

    content = await upload.read(settings.MAX_UPLOAD_BYTES + 1)
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded image is empty",
        )
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"Image exceeds the {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit",
        )

    root = upload_root()
    root.mkdir(parents=True, exist_ok=True)
    filename = f"{uuid.uuid4().hex}{extension}"
    await anyio.Path(root / filename).write_bytes(content)

    url = f"{settings.MEDIA_URL.rstrip('/')}/{filename}"
    logger.info("image_stored", filename=filename, size=len(content), original=upload.filename)
    return url
